# src/review_assistant/review/extractor.py
import re
from .errors import ExtractionError


_JSON_FENCE_RE = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL | re.IGNORECASE)
_TAGGED_FENCE_RE = re.compile(r"```[\w+#.-]*[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)
_BRACE_SPAN_RE = re.compile(r"\{.*\}", re.DOTALL)


def _first_fenced_object(pattern: re.Pattern, text: str) -> str | None:
    for match in pattern.finditer(text):
        candidate = match.group(1).strip()
        if candidate.startswith("{") and candidate.endswith("}"):
            return candidate
    return None


def extract_json(text: str) -> str:
    """Return the substring of a model response most likely to be the JSON payload.

    Tries a ```json fence, then any other fence (untagged or with another
    language tag), then the widest {...} span.
    """
    candidate = _first_fenced_object(_JSON_FENCE_RE, text)
    if candidate is not None:
        return candidate

    candidate = _first_fenced_object(_TAGGED_FENCE_RE, text)
    if candidate is not None:
        return candidate

    match = _BRACE_SPAN_RE.search(text)
    if match:
        return match.group(0)

    raise ExtractionError("Could not find a JSON object in the review response")
