# src/review_assistant/config.py
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from review_assistant.models.config import FilterConfig, Priority, coerce_priority


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    # GitHub
    github_api_url: str = "https://api.github.com"
    github_token: str
    github_webhook_secret: str

    # LLM Providers
    default_provider: str = "gemini"
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_model: str = "gpt-4o-mini"
    max_tokens: int = 4000

    # Review output
    comment_priority: Priority = Priority.LOW
    max_comments: int | None = None
    max_files: int = 50

    # Defaults
    default_language: str = "en"
    reviewer_name: str = "AI Code Review"
    log_dir: str | None = None
    log_level: str = "INFO"

    @field_validator("comment_priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value):
        return coerce_priority(value)

    def filter_config(self) -> FilterConfig:
        return FilterConfig(min_priority=self.comment_priority, max_comments=self.max_comments)
