# src/review_assistant/review/sanitizer.py
import re


ESCAPED_FENCE = "\\`\\`\\`"
ESCAPED_BACKTICK = "\\`"

_BACKSLASH_RUN_RE = re.compile(r"\\{2,}")

# a fence, optionally followed by a language tag on its own line:
# ```\nkotlin\n  ->  ```kotlin\n   (the \n here are JSON escapes, not newlines)
_FENCE_RE = re.compile(r"```(?:\\n([a-z][a-z0-9_+#-]{0,19})\\n)?")


def repair_fence_escapes(text: str) -> str:
    """Turn escaped backticks back into literal markdown fences."""
    return text.replace(ESCAPED_FENCE, "```").replace(ESCAPED_BACKTICK, "`")


def _join_split_language_tags(text: str) -> str:
    fences = 0

    def join(match: re.Match) -> str:
        nonlocal fences
        opening = fences % 2 == 0
        fences += 1
        if opening and match.group(1):
            return f"```{match.group(1)}\\n"
        return match.group(0)

    return _FENCE_RE.sub(join, text)


def sanitize_json_string(text: str) -> str:
    """Repair non-standard escapes in model-produced JSON.

    Rules run in a fixed order:

    1. collapse runs of backslashes left by the model escaping its own output,
    2. unescape backticks (JSON has no backtick escape),
    3. join an opening fence with a language tag the model put on its own line.

    The standard ``\\"`` and ``\\n`` escapes are never rewritten, they are left
    for the JSON decoder. Idempotent, never raises.
    """
    text = _BACKSLASH_RUN_RE.sub(r"\\", text)
    text = repair_fence_escapes(text)
    return _join_split_language_tags(text)
