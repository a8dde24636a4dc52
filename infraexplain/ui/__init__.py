"""UI module for the explain web interface."""

from infraexplain.ui.api_client import APIClient, ExplainServerError
from infraexplain.ui.state import ExplainState
from infraexplain.ui.utils import (
    Segment,
    has_escaped_sequences,
    normalize_typed,
    render_explanation,
    unescape_pasted,
)
from infraexplain.ui.view import ExplainView

__all__ = [
    "APIClient",
    "ExplainServerError",
    "ExplainState",
    "ExplainView",
    "Segment",
    "has_escaped_sequences",
    "normalize_typed",
    "render_explanation",
    "unescape_pasted",
]
