"""Tests for the explain form page and editor events."""

import html as html_lib
import json
import re

from fastapi.testclient import TestClient


def explain_button(html: str) -> str:
    match = re.search(r'<button id="explain-button".*?>', html, re.DOTALL)
    assert match, "Explain button should be rendered"
    return match.group(0)


def editor(html: str) -> str:
    match = re.search(r'<textarea id="terraform-code".*?</textarea>', html, re.DOTALL)
    assert match, "Editor should be rendered"
    return match.group(0)


class TestIndexPage:
    """Test index page content and structure."""

    def test_page_header(self, client: TestClient):
        """GET / shows the title, subtitle and privacy badge."""
        html = client.get("/").text

        assert "<title>InfraExplain</title>" in html
        assert "<h1>InfraExplain</h1>" in html
        assert "Understand your Terraform infrastructure code" in html
        assert "No data stored" in html

    def test_editor(self, client: TestClient):
        """Editor textarea posts change events."""
        html = client.get("/").text
        textarea = editor(html)

        assert 'name="text_content"' in textarea
        assert "placeholder=" in textarea
        assert 'hx-post="/ui/input"' in textarea
        assert "disabled" not in textarea

    def test_form_htmx_attrs(self, client: TestClient):
        """Form posts to /ui/explain and swaps the panel."""
        html = client.get("/").text

        assert 'hx-post="/ui/explain"' in html
        assert 'hx-target="#panel"' in html
        assert 'hx-swap="outerHTML"' in html
        assert '<div id="panel"' in html
        assert "hx-vals='{\"page_id\": " in html

    def test_initial_state(self, client: TestClient):
        """Fresh page: Explain disabled, no alert, no explanation."""
        html = client.get("/").text

        assert "disabled" in explain_button(html)
        assert 'role="alert"' not in html
        assert "explanation-box" not in html
        assert "Clear All" not in html


class TestInputEvents:
    """Test /ui/input change handling."""

    def test_escaped_value_is_normalized(self, client: TestClient, page_id):
        """Escaped value with few newlines comes back unescaped out-of-band."""
        response = client.post(
            "/ui/input",
            data={
                "page_id": page_id,
                "text_content": 'resource \\"aws_s3_bucket\\" \\"b\\" {\\n  bucket = \\"x\\"\\n}',
            },
        )

        assert response.status_code == 200
        textarea = html_lib.unescape(editor(response.text))
        assert 'hx-swap-oob="true"' in textarea
        assert 'resource "aws_s3_bucket" "b" {\n  bucket = "x"\n}' in textarea
        assert "disabled" not in explain_button(response.text)

    def test_multiline_value_is_kept(self, client: TestClient, explain_service, page_id):
        """Values with three or more newlines are stored as typed."""
        value = 'a = 1\nb = 2\nc = 3\nd = "\\n"'
        response = client.post("/ui/input", data={"page_id": page_id, "text_content": value})

        assert response.status_code == 200
        assert "<textarea" not in response.text
        assert 'hx-swap-oob="true"' in explain_button(response.text)

        # Submitting without the field sends the stored value
        client.post("/ui/explain", data={"page_id": page_id})
        assert json.loads(explain_service.requests[0].content) == {"text_content": value}

    def test_blank_value_disables_button(self, client: TestClient, page_id):
        """Whitespace-only input keeps Explain disabled."""
        response = client.post("/ui/input", data={"page_id": page_id, "text_content": "   "})

        assert "disabled" in explain_button(response.text)

    def test_missing_page_id_is_rejected(self, client: TestClient):
        """Requests that name no page are rejected."""
        response = client.post("/ui/input", data={"text_content": "resource {}"})

        assert response.status_code == 400


class TestPasteEvents:
    """Test /ui/paste interception."""

    def test_escaped_paste_replaces_field(self, client: TestClient, page_id):
        """Escaped paste replaces the whole field."""
        client.post("/ui/input", data={"page_id": page_id, "text_content": "existing text"})

        response = client.post(
            "/ui/paste",
            data={"page_id": page_id, "clipboard_text": 'resource \\"aws_s3_bucket\\" \\"b\\" {}'},
        )

        assert response.status_code == 200
        textarea = html_lib.unescape(editor(response.text))
        assert 'resource "aws_s3_bucket" "b" {}' in textarea
        assert "existing text" not in textarea

    def test_plain_paste_is_not_intercepted(self, client: TestClient, page_id):
        """Plain paste returns 204 so the browser pastes normally."""
        response = client.post("/ui/paste", data={"page_id": page_id, "clipboard_text": "resource {}"})

        assert response.status_code == 204
