"""Custom exception classes."""

from typing import Optional


class EatRiteException(Exception):
    """Base exception for EatRite application."""

    pass


class ValidationError(EatRiteException):
    """Raised when input validation fails."""

    pass


class ImageProcessingError(EatRiteException):
    """Raised when image processing fails."""

    pass


class RecipeGenerationError(EatRiteException):
    """Raised when a recipe could not be generated.

    ``detail`` holds the bare reason; ``str(exc)`` prefixes it with the
    operation that failed so it can be shown to users as-is.
    """

    def __init__(self, detail: str, *, image_mode: bool = False) -> None:
        prefix = "Failed to generate recipe from image" if image_mode else "Failed to generate recipe"
        super().__init__(f"{prefix}: {detail}")
        self.detail = detail
        self.image_mode = image_mode


class TransportError(RecipeGenerationError):
    """Raised when the completion backend is unreachable or times out."""

    def __init__(self, detail: str, *, image_mode: bool = False, timed_out: bool = False) -> None:
        super().__init__(detail, image_mode=image_mode)
        self.timed_out = timed_out


class UpstreamRejectedError(RecipeGenerationError):
    """Raised when the completion backend answers with a non-success status."""

    def __init__(self, status_code: int, upstream_message: str, *, image_mode: bool = False) -> None:
        super().__init__(f"OpenAI API error: {upstream_message}", image_mode=image_mode)
        self.status_code = status_code
        self.upstream_message = upstream_message


class EmptyContentError(RecipeGenerationError):
    """Raised when the completion backend returns no message content."""

    def __init__(self, *, image_mode: bool = False) -> None:
        super().__init__("No response content from OpenAI", image_mode=image_mode)


class MalformedContentError(RecipeGenerationError):
    """Raised when the completion content is not a JSON object."""

    def __init__(self, reason: str, content: Optional[str] = None, *, image_mode: bool = False) -> None:
        super().__init__(f"Invalid JSON in OpenAI response: {reason}", image_mode=image_mode)
        self.content = content
