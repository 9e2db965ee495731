# tests/unit/test_recovery.py
import pytest
from review_assistant.models.config import Priority
from review_assistant.models.review import PARSE_FAILED_SUMMARY
from review_assistant.review.errors import ParseError
from review_assistant.review.recovery import (
    ParseTier,
    parse_review_response,
    recover_manually,
    recover_with_regex,
    unescape_json_text,
)


def test_valid_fenced_response_uses_structured_tier():
    outcome = parse_review_response('```json\n{"summary": "Test", "comments": []}\n```')

    assert outcome.tier == ParseTier.STRUCTURED
    assert outcome.review.summary == "Test"
    assert outcome.failures == []


def test_real_world_response_with_code_blocks():
    response = """```json
{
  "summary": "Adds default Adjust steps on project creation.",
  "comments": [
    {
      "path": "api/src/main/kotlin/ProjectFacade.kt",
      "line": 22,
      "body": "**Suggestion**: add a transaction.\\n\\n```kotlin\\n@Transactional\\nfun create(dto: ProjectDto): ProjectDto {\\n    throw ProjectCreationException(\\"failed\\", e)\\n}\\n```"
    },
    {
      "path": "core/src/main/java/AdjustStepStatus.java",
      "line": 40,
      "priority": "low",
      "body": "Extract a constant.\\n\\n\\\\`\\\\`\\\\`java\\npublic static final int MAX_RETRY_ATTEMPTS = 3;\\n\\\\`\\\\`\\\\`"
    }
  ]
}
```"""
    outcome = parse_review_response(response)

    assert outcome.tier == ParseTier.STRUCTURED
    assert len(outcome.review.comments) == 2
    assert "```kotlin\n@Transactional" in outcome.review.comments[0].body
    assert '"failed"' in outcome.review.comments[0].body
    assert "```java" in outcome.review.comments[1].body
    assert outcome.review.comments[1].priority == Priority.LOW


def test_raw_newlines_fall_back_to_regex_tier():
    # literal newlines inside strings are invalid JSON
    response = (
        '{"summary": "Line one\nLine two", "comments": ['
        '{"path": "a.py", "line": 3, "priority": "high", "body": "Use \\"x\\"\nhere"}]}'
    )
    outcome = parse_review_response(response)

    assert outcome.tier == ParseTier.REGEX
    assert [f.tier for f in outcome.failures] == ["structured"]
    assert outcome.review.summary == "Line one\nLine two"
    comment = outcome.review.comments[0]
    assert (comment.path, comment.line, comment.priority) == ("a.py", 3, Priority.HIGH)
    assert comment.body == 'Use "x"\nhere'


def test_truncated_response_recovers_complete_comments():
    response = (
        '```json\n{"summary": "Partial", "comments": ['
        '{"path": "a.py", "line": 1, "body": "first"},'
        '{"path": "b.py", "line": 2, "body": "sec'
    )
    outcome = parse_review_response(response)

    assert outcome.tier in (ParseTier.REGEX, ParseTier.MANUAL)
    assert outcome.review.summary == "Partial"
    assert [c.path for c in outcome.review.comments] == ["a.py"]


def test_summary_only_counts_as_success():
    review = recover_with_regex('{"summary": "Only a summary", "comments": [ oops')

    assert review.summary == "Only a summary"
    assert review.comments == []


def test_regex_tier_fails_without_fields():
    with pytest.raises(ParseError):
        recover_with_regex('{"verdict": "PASS"}')


def test_regex_tier_drops_incomplete_comments():
    review = recover_with_regex(
        '{"summary": "S", "comments": [{"path": "a.py", "body": "no line"}, '
        '{"path": "b.py", "line": 4, "body": "ok"}] trailing'
    )
    assert [(c.path, c.line) for c in review.comments] == [("b.py", 4)]


def test_regex_tier_strips_control_characters():
    review = recover_with_regex('{"summary": "A\x00B\x07C\tD", "comments": []')
    assert review.summary == "ABC\tD"


def test_manual_tier_reads_fields_from_prose():
    raw = (
        'I could not format this properly, sorry. "summary": "Looks fine", '
        'and "comments": [{"path": "x.go", "line": 9, "body": "nit"}]'
    )
    outcome = parse_review_response(raw)

    assert outcome.tier == ParseTier.MANUAL
    assert outcome.review.summary == "Looks fine"
    assert outcome.review.comments[0].path == "x.go"


def test_missing_summary_with_comments_yields_empty_summary():
    review = recover_manually('"comments": [{"path": "x.go", "line": 9, "body": "nit"}]')
    assert review.summary == ""
    assert len(review.comments) == 1


def test_unrecoverable_response_returns_terminal_review():
    outcome = parse_review_response("I am unable to review this pull request.")

    assert outcome.tier == ParseTier.TERMINAL
    assert outcome.review.summary == PARSE_FAILED_SUMMARY
    assert outcome.review.comments == []
    assert [f.tier for f in outcome.failures] == ["extract", "manual"]


def test_tiers_run_in_order_until_terminal():
    outcome = parse_review_response("{not json at all}")

    assert outcome.tier == ParseTier.TERMINAL
    assert [f.tier for f in outcome.failures] == ["structured", "regex", "manual"]


def test_unescape_order_keeps_fences_last():
    assert unescape_json_text('say \\"hi\\"\\n\\`\\`\\`py') == 'say "hi"\n```py'


def test_parsing_is_deterministic():
    response = '{"summary": "S\nT", "comments": [{"path": "a", "line": 1, "body": "b"}]}'
    assert parse_review_response(response) == parse_review_response(response)
