"""Pytest configuration and fixtures."""

import os
import re

import httpx
import pytest


def pytest_configure(config):
    """Set up test environment variables before tests run."""
    os.environ.setdefault("API_BASE_URL", "")
    os.environ.setdefault("EXPLAIN_BACKEND_URL", "http://backend.test:8080")
    os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
    os.environ.setdefault("BACKEND_PORT", "8080")


class StubExplainService:
    """In-memory explanation service behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json_body: object | None = {"summary": "Creates an S3 bucket."}
        self.text_body = ""
        self.error: Exception | None = None
        self.healthy = True

    def respond(self, status_code: int = 200, json_body=None, text_body: str = "") -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.text_body = text_body

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/health":
            if not self.healthy:
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(200, json={"status": "available"})

        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body)
        return httpx.Response(self.status_code, text=self.text_body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def explain_service():
    """Provide a stub explanation service."""
    return StubExplainService()


@pytest.fixture
def client(explain_service):
    """Create a test client whose views talk to the stub service."""
    from fastapi.testclient import TestClient

    from infraexplain.api.main import app

    app.state.api_transport = explain_service.transport
    yield TestClient(app)
    app.state.api_transport = None


@pytest.fixture
def page_id(client):
    """Open the page once and return the ID of its view."""
    match = re.search(r'data-page-id="([^"]+)"', client.get("/").text)
    assert match, "Panel should carry a page ID"
    return match.group(1)
