# tests/unit/test_pipeline.py
from unittest.mock import patch
from review_assistant.models.config import FilterConfig, Priority
from review_assistant.models.diff import DiffRange
from review_assistant.models.review import PARSE_FAILED_SUMMARY, UNKNOWN_ERROR_SUMMARY
from review_assistant.review.pipeline import ReviewPipeline
from review_assistant.review.recovery import ParseTier


RESPONSE = """Here is the review:
```json
{
  "summary": "Test summary",
  "overview": "extra",
  "comments": [
    {"path": "file1.ts", "line": 10, "priority": "low", "body": "Low"},
    {"path": "file2.ts", "line": 20, "priority": "medium", "body": "Medium"},
    {"path": "file3.ts", "line": 30, "priority": "high", "body": "High"},
    {"path": "file4.ts", "line": 40, "priority": "critical", "body": "Critical"},
    {"path": "file4.ts", "line": 99, "priority": "critical", "body": "Hallucinated line"},
    {"path": "file4.ts", "line": "41", "body": "Bad line type"}
  ]
}
```"""

RANGES = {
    "file1.ts": [DiffRange(start=1, end=15)],
    "file2.ts": [DiffRange(start=18, end=22)],
    "file3.ts": [DiffRange(start=30, end=30)],
    "file4.ts": [DiffRange(start=35, end=45)],
}


def test_full_pipeline():
    pipeline = ReviewPipeline(FilterConfig(min_priority=Priority.MEDIUM))

    result = pipeline.run(RESPONSE, RANGES)

    assert result.tier == ParseTier.STRUCTURED
    assert result.parsed_comments == 6
    assert [c.path for c in result.review.comments] == ["file4.ts", "file3.ts", "file2.ts"]
    assert result.review.summary.startswith("Test summary")
    assert "showing 3 of 4 comments" in result.review.summary


def test_without_ranges_skips_diff_validation():
    review = ReviewPipeline().process(RESPONSE)

    assert len(review.comments) == 6
    assert review.summary == "Test summary"


def test_terminal_review_passes_through():
    review = ReviewPipeline().process("no structure here", RANGES)

    assert review.summary == PARSE_FAILED_SUMMARY
    assert review.comments == []


def test_all_comments_outside_diff_keeps_summary():
    review = ReviewPipeline().process(
        '{"summary": "S", "comments": [{"path": "other.ts", "line": 1, "body": "b"}]}', RANGES
    )

    assert review.summary == "S"
    assert review.comments == []


def test_pipeline_is_idempotent():
    pipeline = ReviewPipeline(FilterConfig(max_comments=2))

    assert pipeline.process(RESPONSE, RANGES) == pipeline.process(RESPONSE, RANGES)


def test_unexpected_errors_degrade_to_unknown_error():
    with patch("review_assistant.review.pipeline.parse_review_response", side_effect=RuntimeError("boom")):
        result = ReviewPipeline().run(RESPONSE, RANGES)

    assert result.review.summary == UNKNOWN_ERROR_SUMMARY
    assert result.review.comments == []
    assert result.tier is None
