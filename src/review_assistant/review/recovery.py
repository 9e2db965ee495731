# src/review_assistant/review/recovery.py
"""Recovering a review from model output that does not parse as JSON.

Strategies run strictly in order, each only after the previous one failed:

1. structured parse of the extracted JSON object,
2. regex recovery over the extracted object,
3. regex recovery over the whole raw response,

and when all of them fail the terminal review (a fixed summary, no comments)
is returned. ``parse_review_response`` never raises.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from review_assistant.models.review import PARSE_FAILED_SUMMARY, ReviewComment, StructuredReview
from .errors import ExtractionError, ParseError, ReviewParsingError
from .extractor import extract_json
from .sanitizer import repair_fence_escapes
from .structure import parse_priority, parse_structured_review


logger = logging.getLogger(__name__)

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_JSON_STRING = r'"((?:[^"\\]|\\.)*)"'
_SUMMARY_RE = re.compile(r'"summary"\s*:\s*' + _JSON_STRING, re.DOTALL)
_COMMENTS_START_RE = re.compile(r'"comments"\s*:\s*\[')
_OBJECT_RE = re.compile(r'\{((?:[^{}"]|"(?:[^"\\]|\\.)*")*)\}', re.DOTALL)
_PATH_RE = re.compile(r'"path"\s*:\s*' + _JSON_STRING, re.DOTALL)
_LINE_RE = re.compile(r'"line"\s*:\s*"?(\d+)')
_BODY_RE = re.compile(r'"body"\s*:\s*' + _JSON_STRING, re.DOTALL)
_PRIORITY_RE = re.compile(r'"priority"\s*:\s*"(\w+)"')


class ParseTier(str, Enum):
    STRUCTURED = "structured"
    REGEX = "regex"
    MANUAL = "manual"
    TERMINAL = "terminal"


@dataclass
class TierFailure:
    tier: str
    reason: str


@dataclass
class ParseOutcome:
    review: StructuredReview
    tier: ParseTier
    failures: list[TierFailure] = field(default_factory=list)


def unescape_json_text(value: str) -> str:
    # newlines and quotes first, fences last
    value = value.replace("\\n", "\n").replace('\\"', '"')
    return repair_fence_escapes(value)


def _comments_region(text: str) -> str | None:
    match = _COMMENTS_START_RE.search(text)
    if not match:
        return None
    region = text[match.end():]
    # a truncated response has no closing bracket, keep whatever is there
    end = region.rfind("]")
    return region[:end] if end != -1 else region


def _comments_from(region: str) -> list[ReviewComment]:
    comments = []
    for match in _OBJECT_RE.finditer(region):
        fields = match.group(1)
        path = _PATH_RE.search(fields)
        line = _LINE_RE.search(fields)
        body = _BODY_RE.search(fields)
        if not (path and line and body):
            continue
        priority = _PRIORITY_RE.search(fields)
        comments.append(ReviewComment(
            path=unescape_json_text(path.group(1)),
            line=int(line.group(1)),
            body=unescape_json_text(body.group(1)),
            priority=parse_priority(priority.group(1)) if priority else None,
        ))
    return comments


def _recover_fields(text: str) -> StructuredReview:
    cleaned = _CONTROL_CHARS_RE.sub("", text)

    summary_match = _SUMMARY_RE.search(cleaned)
    region = _comments_region(cleaned)
    comments = _comments_from(region) if region is not None else []

    if summary_match is None and not comments:
        raise ParseError("No summary or comments could be recovered")

    summary = unescape_json_text(summary_match.group(1)) if summary_match else ""
    return StructuredReview(summary=summary, comments=comments)


def recover_with_regex(text: str) -> StructuredReview:
    """Pull summary and comments out of an extracted, unparseable JSON object."""
    return _recover_fields(text)


def recover_manually(raw_text: str) -> StructuredReview:
    """Same field recovery as recover_with_regex, over the full raw response."""
    return _recover_fields(raw_text)


def terminal_review() -> StructuredReview:
    return StructuredReview(summary=PARSE_FAILED_SUMMARY, comments=[])


def parse_review_response(raw_text: str) -> ParseOutcome:
    """Run every recovery strategy in order and return the first success."""
    failures: list[TierFailure] = []

    try:
        candidate = extract_json(raw_text)
    except ExtractionError as e:
        logger.warning(f"JSON extraction failed: {e}")
        failures.append(TierFailure(tier="extract", reason=str(e)))
        strategies = [(ParseTier.MANUAL, recover_manually, raw_text)]
    else:
        strategies = [
            (ParseTier.STRUCTURED, parse_structured_review, candidate),
            (ParseTier.REGEX, recover_with_regex, candidate),
            (ParseTier.MANUAL, recover_manually, raw_text),
        ]

    for tier, strategy, text in strategies:
        try:
            review = strategy(text)
        except ReviewParsingError as e:
            logger.warning(f"Review parsing tier '{tier.value}' failed: {e}")
            failures.append(TierFailure(tier=tier.value, reason=str(e)))
            continue
        if failures:
            logger.info(f"Recovered review using tier '{tier.value}' after {len(failures)} failure(s)")
        return ParseOutcome(review=review, tier=tier, failures=failures)

    logger.error("All review parsing strategies failed, returning terminal review")
    return ParseOutcome(review=terminal_review(), tier=ParseTier.TERMINAL, failures=failures)
