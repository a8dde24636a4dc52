"""Explain view: event handlers over a single ExplainState."""

import logging

import httpx

from infraexplain.ui.api_client import APIClient
from infraexplain.ui.state import ExplainState
from infraexplain.ui.utils import (
    Segment,
    has_escaped_sequences,
    normalize_typed,
    render_explanation,
    unescape_pasted,
)

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Please enter some Terraform code to explain."
ERROR_PREFIX = "Failed to get explanation: "
NETWORK_FAILURE_MARKERS = ("Failed to fetch", "NetworkError")


def backend_unreachable_message(port: int) -> str:
    """Message shown when the explanation service cannot be reached."""
    return f"Unable to connect to the backend server. Make sure it's running on port {port}."


def is_network_failure(error: Exception) -> bool:
    """Check whether a failure happened below HTTP (connection, DNS, protocol).

    Args:
        error: The raised exception.

    Returns:
        True for transport errors and for messages naming a fetch failure.
    """
    if isinstance(error, httpx.TransportError):
        return True
    message = str(error)
    return any(marker in message for marker in NETWORK_FAILURE_MARKERS)


class ExplainView:
    """One explain form: input normalization, submission, clear and teardown.

    The host dispatches browser events to the handle_* methods and renders
    from ``state``. Error details stay in the state and are never logged.
    """

    def __init__(self, client: APIClient, backend_port: int = 8080):
        self.client = client
        self.backend_port = backend_port
        self.state = ExplainState()
        self._torn_down = False

    def handle_change(self, value: str) -> str:
        """Store an edited field value, unescaping it if it looks escaped.

        Args:
            value: Full field value after the change.

        Returns:
            The stored value.
        """
        self.state.input_text = normalize_typed(value)
        return self.state.input_text

    def handle_paste(self, clipboard_text: str) -> bool:
        """Intercept a paste carrying literal escape sequences.

        The unescaped text replaces the whole field, not just the selection.

        Args:
            clipboard_text: Text from the clipboard.

        Returns:
            True if the paste was intercepted and the default insertion must
            be suppressed, False to let the default paste happen.
        """
        if not clipboard_text or not has_escaped_sequences(clipboard_text):
            return False
        self.state.input_text = unescape_pasted(clipboard_text)
        return True

    async def handle_key_down(self, key: str, ctrl: bool = False, meta: bool = False) -> bool:
        """Submit on Ctrl+Enter or Cmd+Enter.

        Returns:
            True if the key combination is the submit shortcut.
        """
        if (ctrl or meta) and key == "Enter":
            await self.explain()
            return True
        return False

    async def explain(self) -> None:
        """Send the input to the explanation service and record the outcome."""
        state = self.state
        if state.is_loading:
            logger.debug("Explain ignored, request already in flight")
            return

        if not state.input_text.strip():
            state.error_message = VALIDATION_MESSAGE
            return

        state.is_loading = True
        state.error_message = ""
        state.explanation_text = ""

        summary = ""
        error_message = ""
        try:
            summary = await self.client.explain(state.input_text)
        except Exception as e:
            logger.info(f"Explanation request failed ({type(e).__name__})")
            error_message = ERROR_PREFIX + self._describe_failure(e)
        finally:
            state.is_loading = False

        # Results arriving after teardown are dropped
        if self._torn_down:
            return
        state.explanation_text = summary
        state.error_message = error_message

    def _describe_failure(self, error: Exception) -> str:
        if is_network_failure(error):
            return backend_unreachable_message(self.backend_port)
        return str(error)

    def clear(self) -> None:
        """Clear input, explanation and error."""
        self.state.reset()

    def teardown(self) -> None:
        """Dispose of the view. A request still in flight is discarded on arrival."""
        self._torn_down = True
        self.state.reset()

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    def explanation_lines(self) -> list[list[Segment]]:
        """Explanation split into lines of plain and bold segments."""
        if not self.state.explanation_text:
            return []
        return render_explanation(self.state.explanation_text)
