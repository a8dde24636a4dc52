"""API client for communicating with the explanation service."""

import logging

import httpx

from infraexplain.api.models import ExplainRequest, ExplainResponse
from infraexplain.config import settings

logger = logging.getLogger(__name__)

NO_EXPLANATION = "No explanation available."


class ExplainServerError(Exception):
    """The explanation service answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str = ""):
        super().__init__(detail or f"Server error: {status_code}")
        self.status_code = status_code


def resolve_base_url(api_base_url: str, origin: str) -> str:
    """Resolve the service base URL.

    Args:
        api_base_url: Configured API_BASE_URL. Empty means same-origin.
        origin: Origin of the page the view is served from.

    Returns:
        Base URL without a trailing slash.
    """
    return (api_base_url or origin).rstrip("/")


class APIClient:
    """Client for the explanation API."""

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            base_url: Base URL of the explanation service. If not provided, uses
                     API_BASE_URL from settings.
            transport: Optional httpx transport, used to stub the service.
        """
        self.base_url = (settings.api_base_url if base_url is None else base_url).rstrip("/")
        self.timeout = None  # No timeout or abort wiring
        self._transport = transport

    def _client(self, timeout: float | None) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def health_check(self) -> bool:
        """Check if the explanation service is reachable.

        Returns:
            True if the service answered 200, False otherwise.
        """
        try:
            async with self._client(timeout=5.0) as client:
                response = await client.get(f"{self.base_url}/health")
                return response.status_code == 200
        except httpx.RequestError:
            return False

    async def explain(self, text_content: str) -> str:
        """Request an explanation of Terraform source.

        Args:
            text_content: Terraform source, sent as-is.

        Returns:
            The summary from the service, or a fallback when it has none.

        Raises:
            ExplainServerError: If the service answers with a non-2xx status.
            httpx.TransportError: If the service cannot be reached.
            ValueError: If a 2xx body is not valid JSON.
        """
        payload = ExplainRequest(text_content=text_content)
        async with self._client(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/explain",
                json=payload.model_dump(),
                headers={"Content-Type": "application/json"},
            )

        if not response.is_success:
            logger.debug(f"Explanation service returned {response.status_code}")
            raise ExplainServerError(response.status_code, response.text)

        data = response.json()
        # Anything but an object carries no summary
        body = ExplainResponse.model_validate(data if isinstance(data, dict) else {})
        if not body.summary:
            return NO_EXPLANATION
        return str(body.summary)
