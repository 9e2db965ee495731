# src/review_assistant/review/diff.py
import logging
import re
from dataclasses import dataclass, field
from unidiff import PatchSet
from review_assistant.models.diff import DiffRange
from review_assistant.models.review import ReviewComment, StructuredReview


logger = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(?P<start>\d+)(?:,(?P<count>\d+))? @@")

DiffRanges = dict[str, list[DiffRange]]


@dataclass
class DiffFile:
    path: str
    is_deleted: bool
    ranges: list[DiffRange] = field(default_factory=list)


def _hunk_range(start: int, count: int) -> DiffRange | None:
    # pure deletions leave nothing to anchor on in the new file
    if count <= 0 or start <= 0:
        return None
    return DiffRange(start=start, end=start + count - 1)


def parse_hunk_header(header: str) -> DiffRange | None:
    """Parse ``@@ -a,b +c,d @@`` into the new-file range ``[c, c + d - 1]``."""
    match = _HUNK_HEADER_RE.match(header.strip())
    if not match:
        return None
    count = match.group("count")
    return _hunk_range(int(match.group("start")), int(count) if count is not None else 1)


def ranges_from_hunk_headers(headers: list[str]) -> list[DiffRange]:
    ranges = [r for r in (parse_hunk_header(h) for h in headers) if r is not None]
    return sorted(ranges, key=lambda r: (r.start, r.end))


def parse_diff(diff_text: str) -> list[DiffFile]:
    """Parse unified diff and extract file information."""
    patch = PatchSet(diff_text)
    files = []

    for patched_file in patch:
        ranges = []

        for hunk in patched_file:
            hunk_range = _hunk_range(hunk.target_start, hunk.target_length)
            if hunk_range is not None:
                ranges.append(hunk_range)

        files.append(DiffFile(
            path=patched_file.path,
            is_deleted=patched_file.is_removed_file,
            ranges=ranges,
        ))

    return files


def diff_ranges(files: list[DiffFile]) -> DiffRanges:
    """Map each surviving file path to its hunk ranges."""
    return {f.path: f.ranges for f in files if not f.is_deleted}


def is_in_diff(path: str, line: int, ranges: DiffRanges) -> bool:
    return any(r.contains(line) for r in ranges.get(path, ()))


def filter_comments_by_ranges(
    comments: list[ReviewComment],
    ranges: DiffRanges,
) -> tuple[list[ReviewComment], list[ReviewComment]]:
    """Split comments into (anchorable, dropped) by the diff ranges of their file."""
    valid = []
    invalid = []
    for comment in comments:
        if is_in_diff(comment.path, comment.line, ranges):
            valid.append(comment)
        else:
            invalid.append(comment)
    return valid, invalid


def validate_review_against_diff(review: StructuredReview, ranges: DiffRanges) -> StructuredReview:
    """Return a copy of the review keeping only comments that land inside the diff."""
    valid, invalid = filter_comments_by_ranges(review.comments, ranges)
    for comment in invalid:
        logger.info(f"Dropping comment outside the diff: {comment.path}:{comment.line}")
    return StructuredReview(summary=review.summary, comments=valid)
