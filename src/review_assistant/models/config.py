from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def coerce_priority(value):
    """Accept 'all' as the lowest floor, otherwise defer to the enum."""
    if isinstance(value, str) and value.strip().lower() == "all":
        return Priority.LOW
    if isinstance(value, str):
        return value.strip().lower()
    return value


class FilterConfig(BaseModel):
    """Severity floor and comment cap applied after parsing."""
    model_config = ConfigDict(frozen=True)

    min_priority: Priority = Priority.LOW
    max_comments: int | None = None

    @field_validator("min_priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value):
        return coerce_priority(value)

    @field_validator("max_comments")
    @classmethod
    def _unbounded_when_not_positive(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            return None
        return value


class RepoConfig(BaseModel):
    language: str | None = None
    exclude: list[str] = Field(
        default_factory=lambda: [
            "*.md",
            "*.lock",
            "*.min.js",
            "*.min.css",
            "*.generated.*",
            "package-lock.json",
            "yarn.lock",
            "pnpm-lock.yaml",
        ]
    )
    auto_review: bool = True
    comment_priority: Priority | None = None
    max_comments: int | None = None

    @field_validator("comment_priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value):
        return coerce_priority(value)

    def filter_config(self, min_priority: Priority, max_comments: int | None) -> FilterConfig:
        """Merge repo overrides over operator defaults."""
        return FilterConfig(
            min_priority=self.comment_priority or min_priority,
            max_comments=self.max_comments if self.max_comments is not None else max_comments,
        )
