class ReviewParsingError(Exception):
    """Base class for failures while turning model output into a review."""


class ExtractionError(ReviewParsingError):
    """No JSON-like span was found in the response text."""


class ParseError(ReviewParsingError):
    """Text was found but could not be turned into a structured review."""

    def __init__(self, message: str, present_fields: list[str] | None = None) -> None:
        self.present_fields = present_fields or []
        super().__init__(message)
