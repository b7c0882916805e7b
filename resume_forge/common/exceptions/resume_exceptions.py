"""Exceptions raised by the tailoring and review pipeline."""


class ResumeForgeError(Exception):
    """Base exception for resume_forge errors."""

    pass


class UpstreamError(ResumeForgeError):
    """Raised when the generative-text provider call fails (network, timeout, API error)."""

    pass


class MalformedResponseError(ResumeForgeError):
    """Raised when no JSON object can be recovered from a model response."""

    def __init__(
        self,
        text_length: int,
        excerpt: str,
        error_offset: int | None = None,
        error_window: str | None = None,
        parse_error: str | None = None,
    ) -> None:
        self.text_length = text_length
        self.excerpt = excerpt
        self.error_offset = error_offset
        self.error_window = error_window
        self.parse_error = parse_error
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        message = "Failed to extract a JSON object from the AI response."
        if self.parse_error:
            message += f" Parse error: {self.parse_error}."
        if self.error_offset is not None and self.error_window:
            message += f"\n\nError at position {self.error_offset}:\n{self.error_window}"
        message += f"\n\nResponse length: {self.text_length}. First {len(self.excerpt)} chars: {self.excerpt}"
        return message


class ValidationError(ResumeForgeError):
    """Raised when recovered JSON does not match the target schema."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"Invalid value at '{path}': {message}")


class SessionStateError(ResumeForgeError):
    """Raised when a review session operation is not allowed in its current state."""

    pass


class GenerationInProgressError(SessionStateError):
    """Raised when a regeneration is requested while another one is still outstanding."""

    pass
