from pydantic import BaseModel, Field
from .config import Priority


PARSE_FAILED_SUMMARY = "Failed to parse the code review response."
GENERATION_ERROR_SUMMARY = "An error occurred while generating the code review"
UNKNOWN_ERROR_SUMMARY = "The code review could not be generated due to an unknown error."

FAILURE_SUMMARIES = (
    PARSE_FAILED_SUMMARY,
    GENERATION_ERROR_SUMMARY,
    UNKNOWN_ERROR_SUMMARY,
)

PLACEHOLDER_PATH = "unknown"
PLACEHOLDER_BODY = "Error: Invalid comment structure received."


class ReviewComment(BaseModel):
    path: str
    line: int = Field(ge=0)
    body: str
    priority: Priority | None = None


class StructuredReview(BaseModel):
    summary: str
    comments: list[ReviewComment] = Field(default_factory=list)


def placeholder_comment() -> ReviewComment:
    return ReviewComment(path=PLACEHOLDER_PATH, line=0, body=PLACEHOLDER_BODY)


def generation_error_summary(message: str) -> str:
    return f"{GENERATION_ERROR_SUMMARY}: {message}"


def is_failure_summary(summary: str) -> bool:
    """True when the summary is one of the internal failure sentinels."""
    return summary.startswith(FAILURE_SUMMARIES)
