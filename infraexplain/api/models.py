"""API request and response models."""

from typing import Any

from pydantic import BaseModel, Field


class ExplainRequest(BaseModel):
    """Request body sent to the explanation service."""

    text_content: str = Field(description="Terraform source to explain")


class ExplainResponse(BaseModel):
    """Response body from the explanation service."""

    # Any truthy value is shown as text
    summary: Any = Field(default=None, description="Natural-language explanation")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status")

