from .config import RepoConfig, FilterConfig, Priority
from .diff import DiffRange
from .review import ReviewComment, StructuredReview, is_failure_summary
from .webhook import GitHubPullRequestEvent, GitHubIssueCommentEvent

__all__ = [
    "RepoConfig",
    "FilterConfig",
    "Priority",
    "DiffRange",
    "ReviewComment",
    "StructuredReview",
    "is_failure_summary",
    "GitHubPullRequestEvent",
    "GitHubIssueCommentEvent",
]
