from .diff import parse_diff, DiffFile, parse_hunk_header, validate_review_against_diff
from .errors import ExtractionError, ParseError
from .pipeline import ReviewPipeline, PipelineResult
from .prompts import build_review_prompt, ReviewFile
from .engine import ReviewEngine, EngineReviewResult

__all__ = [
    "parse_diff",
    "DiffFile",
    "parse_hunk_header",
    "validate_review_against_diff",
    "ExtractionError",
    "ParseError",
    "ReviewPipeline",
    "PipelineResult",
    "build_review_prompt",
    "ReviewFile",
    "ReviewEngine",
    "EngineReviewResult",
]
