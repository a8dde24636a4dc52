"""State model for the explain view."""

from pydantic import BaseModel, Field


class ExplainState(BaseModel):
    """Per-view UI state. Nothing here outlives the view."""

    input_text: str = Field(default="", description="Terraform source in the editor")
    explanation_text: str = Field(default="", description="Last explanation received")
    is_loading: bool = Field(default=False, description="Request in flight")
    error_message: str = Field(default="", description="Validation or request error")

    @property
    def can_submit(self) -> bool:
        """Whether the Explain button is enabled."""
        return not self.is_loading and bool(self.input_text.strip())

    @property
    def input_disabled(self) -> bool:
        """Whether the editor is disabled."""
        return self.is_loading

    @property
    def show_explanation(self) -> bool:
        """Whether the explanation box and Clear button are rendered."""
        return bool(self.explanation_text)

    @property
    def show_error(self) -> bool:
        """Whether the alert is rendered."""
        return bool(self.error_message)

    def reset(self) -> None:
        """Clear input, explanation and error. The loading flag is left alone."""
        self.input_text = ""
        self.explanation_text = ""
        self.error_message = ""
