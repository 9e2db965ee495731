# src/review_assistant/review/structure.py
import json
import logging
from typing import Any
from review_assistant.models.config import Priority
from review_assistant.models.review import ReviewComment, StructuredReview, placeholder_comment
from .errors import ParseError
from .sanitizer import repair_fence_escapes, sanitize_json_string


logger = logging.getLogger(__name__)

REVIEW_FIELDS = ("summary", "comments")


def parse_priority(value: Any) -> Priority | None:
    """Map a free-form priority label to the enum, unknown labels become None."""
    if not isinstance(value, str):
        return None
    try:
        return Priority(value.strip().lower())
    except ValueError:
        logger.debug(f"Ignoring unrecognized comment priority: {value!r}")
        return None


def _as_line_number(value: Any) -> int | None:
    # bool is an int subclass, never a line number
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None


def normalize_comment(raw: Any) -> ReviewComment:
    """Validate one decoded comment, returning a placeholder if it is malformed."""
    if not isinstance(raw, dict):
        logger.warning(f"Replacing non-object comment with placeholder: {raw!r}")
        return placeholder_comment()

    path = raw.get("path")
    line = _as_line_number(raw.get("line"))
    body = raw.get("body")

    if not isinstance(path, str) or line is None or not isinstance(body, str):
        logger.warning(
            f"Replacing malformed comment with placeholder "
            f"(path={path!r}, line={raw.get('line')!r}, body type={type(body).__name__})"
        )
        return placeholder_comment()

    return ReviewComment(
        path=path,
        line=line,
        body=repair_fence_escapes(body),
        priority=parse_priority(raw.get("priority")),
    )


def parse_structured_review(text: str) -> StructuredReview:
    """Decode sanitized JSON into a StructuredReview.

    Raises ParseError when the text is not JSON or lacks ``summary``/``comments``.
    Extra top-level fields are logged and dropped; malformed comments are
    replaced with placeholders instead of failing the whole review.
    """
    sanitized = sanitize_json_string(text)
    try:
        data = json.loads(sanitized)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in review response: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

    present = sorted(data.keys())
    if not isinstance(data.get("summary"), str):
        raise ParseError(
            f"Review is missing a string 'summary' field (present fields: {present})",
            present_fields=present,
        )
    if not isinstance(data.get("comments"), list):
        raise ParseError(
            f"Review is missing a 'comments' array (present fields: {present})",
            present_fields=present,
        )

    extra = [key for key in present if key not in REVIEW_FIELDS]
    if extra:
        logger.warning(f"Discarding unexpected review fields: {', '.join(extra)}")

    return StructuredReview(
        summary=data["summary"],
        comments=[normalize_comment(item) for item in data["comments"]],
    )
