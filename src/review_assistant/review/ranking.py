# src/review_assistant/review/ranking.py
import logging
from review_assistant.models.config import FilterConfig, Priority
from review_assistant.models.review import ReviewComment, StructuredReview


logger = logging.getLogger(__name__)

PRIORITY_ORDER = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.CRITICAL: 3,
}


def priority_ordinal(priority: Priority | None) -> int:
    """Missing priority ranks as low."""
    if priority is None:
        return PRIORITY_ORDER[Priority.LOW]
    return PRIORITY_ORDER[priority]


def rank_comments(comments: list[ReviewComment]) -> list[ReviewComment]:
    """Sort by descending priority; sorted() is stable so ties keep their order."""
    return sorted(comments, key=lambda c: priority_ordinal(c.priority), reverse=True)


def filtered_notice(kept: int, total: int) -> str:
    return (
        f"\n\n> **Note:** showing {kept} of {total} comments, "
        f"selected by priority ({total - kept} omitted)."
    )


def apply_filters(review: StructuredReview, config: FilterConfig) -> StructuredReview:
    """Rank comments, then apply the severity floor and the comment cap."""
    total = len(review.comments)
    comments = rank_comments(review.comments)

    floor = PRIORITY_ORDER[config.min_priority]
    if floor > 0:
        comments = [c for c in comments if priority_ordinal(c.priority) >= floor]

    if config.max_comments is not None and config.max_comments > 0:
        comments = comments[:config.max_comments]

    summary = review.summary
    if len(comments) < total:
        logger.info(f"Kept {len(comments)} of {total} comments after priority filtering")
        summary += filtered_notice(len(comments), total)

    return StructuredReview(summary=summary, comments=comments)
