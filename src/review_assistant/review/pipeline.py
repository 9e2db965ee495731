# src/review_assistant/review/pipeline.py
import logging
from dataclasses import dataclass, field
from review_assistant.models.config import FilterConfig
from review_assistant.models.review import UNKNOWN_ERROR_SUMMARY, StructuredReview
from .diff import DiffRanges, validate_review_against_diff
from .ranking import apply_filters
from .recovery import ParseTier, TierFailure, parse_review_response


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    review: StructuredReview
    tier: ParseTier | None
    failures: list[TierFailure] = field(default_factory=list)
    parsed_comments: int = 0


class ReviewPipeline:
    """Raw model text -> parsed, diff-validated, priority-filtered review."""

    def __init__(self, filter_config: FilterConfig | None = None):
        self.filter_config = filter_config or FilterConfig()

    def run(self, raw_text: str, ranges: DiffRanges | None = None) -> PipelineResult:
        try:
            outcome = parse_review_response(raw_text)
            review = outcome.review
            parsed = len(review.comments)

            if ranges is not None:
                review = validate_review_against_diff(review, ranges)
            review = apply_filters(review, self.filter_config)
        except Exception as e:
            logger.exception(f"Review pipeline failed unexpectedly: {e}")
            return PipelineResult(review=StructuredReview(summary=UNKNOWN_ERROR_SUMMARY), tier=None)

        return PipelineResult(
            review=review,
            tier=outcome.tier,
            failures=outcome.failures,
            parsed_comments=parsed,
        )

    def process(self, raw_text: str, ranges: DiffRanges | None = None) -> StructuredReview:
        return self.run(raw_text, ranges).review
