"""API module for the FastAPI web host."""

from infraexplain.api.models import (
    ExplainRequest,
    ExplainResponse,
    HealthResponse,
)

__all__ = [
    "ExplainRequest",
    "ExplainResponse",
    "HealthResponse",
]
