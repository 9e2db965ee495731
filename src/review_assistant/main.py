# src/review_assistant/main.py
import hashlib
import hmac
import re
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from fastapi import FastAPI, Header, HTTPException, BackgroundTasks, Request
from pydantic import BaseModel, model_validator

from review_assistant import __version__
from review_assistant.config import Settings
from review_assistant.models.webhook import GitHubIssueCommentEvent, GitHubPullRequestEvent
from review_assistant.platforms.github import GitHubClient
from review_assistant.providers.base import LLMProvider
from review_assistant.providers.gemini import GeminiProvider
from review_assistant.providers.openai_compat import OpenAIProvider
from review_assistant.review.engine import ReviewEngine


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

REVIEW_ACTIONS = ("opened", "synchronize", "reopened")


@lru_cache
def get_settings() -> Settings:
    return Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger().setLevel(get_settings().log_level.upper())
    logger.info("Code Review Assistant starting...")
    yield
    logger.info("Code Review Assistant shutting down...")


app = FastAPI(title="Code Review Assistant", lifespan=lifespan)


class WebhookResponse(BaseModel):
    status: str
    message: str | None = None


class ReviewRequest(BaseModel):
    url: str | None = None
    owner: str | None = None
    repo: str | None = None
    pr_number: int | None = None

    @model_validator(mode="after")
    def check_params(self):
        if not self.url and not (self.owner and self.repo and self.pr_number):
            raise ValueError("Either url or owner+repo+pr_number required")
        return self


class ReviewResponse(BaseModel):
    status: str
    owner: str | None = None
    repo: str | None = None
    pr_number: int | None = None
    comments_posted: int | None = None
    parse_tier: str | None = None
    summary: str | None = None
    error: str | None = None


def parse_github_pr_url(url: str) -> tuple[str, str, int]:
    """Parse GitHub PR URL -> (owner, repo, pr_number)."""
    match = re.match(r"https?://[^/]+/([^/]+)/([^/]+)/pull/(\d+)", url)
    if not match:
        raise ValueError(f"Invalid GitHub pull request URL: {url}")
    return match.group(1), match.group(2), int(match.group(3))


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check X-Hub-Signature-256 against the HMAC-SHA256 of the raw body."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"sha256={expected}", signature)


def get_provider(settings: Settings) -> LLMProvider | None:
    """Get LLM provider based on settings."""
    if settings.default_provider == "gemini" and settings.gemini_api_key:
        return GeminiProvider(api_key=settings.gemini_api_key, model=settings.gemini_model)
    elif settings.default_provider == "openai" and settings.openai_api_key:
        return OpenAIProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            max_tokens=settings.max_tokens,
        )
    return None


def build_engine(settings: Settings, github: GitHubClient, provider: LLMProvider) -> ReviewEngine:
    return ReviewEngine(
        platform=github,
        provider=provider,
        filter_config=settings.filter_config(),
        reviewer_name=settings.reviewer_name,
        language=settings.default_language,
        max_files=settings.max_files,
        log_dir=settings.log_dir,
    )


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@app.post("/webhook/github", response_model=WebhookResponse)
async def github_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_github_event: str = Header(...),
    x_hub_signature_256: str | None = Header(None),
):
    settings = get_settings()

    body = await request.body()
    if not verify_signature(settings.github_webhook_secret, body, x_hub_signature_256):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    payload = await request.json()

    if x_github_event == "pull_request":
        event = GitHubPullRequestEvent(**payload)

        if event.action in REVIEW_ACTIONS:
            background_tasks.add_task(
                run_review,
                owner=event.repository.owner.login,
                repo=event.repository.name,
                pr_number=event.pull_request.number,
                automatic=True,
            )
            return WebhookResponse(status="accepted", message="Review scheduled")

    elif x_github_event == "issue_comment":
        event = GitHubIssueCommentEvent(**payload)

        if (
            event.action == "created"
            and event.issue.pull_request is not None
            and "/review" in event.comment.body
        ):
            background_tasks.add_task(
                run_review,
                owner=event.repository.owner.login,
                repo=event.repository.name,
                pr_number=event.issue.number,
            )
            return WebhookResponse(status="accepted", message="Review scheduled")

    return WebhookResponse(status="ignored", message="Event not relevant")


@app.post("/api/review", response_model=ReviewResponse)
async def trigger_review(request: ReviewRequest):
    """Manually trigger a review for a pull request."""
    settings = get_settings()
    github = GitHubClient(token=settings.github_token, api_url=settings.github_api_url)

    try:
        if request.url:
            owner, repo, pr_number = parse_github_pr_url(request.url)
        else:
            owner, repo, pr_number = request.owner, request.repo, request.pr_number

        provider = get_provider(settings)
        if not provider:
            return ReviewResponse(
                status="error",
                error="No LLM provider configured",
            )

        engine = build_engine(settings, github, provider)
        result = await engine.review_pr(owner=owner, repo=repo, pr_number=pr_number)

        return ReviewResponse(
            status="completed" if result.published or not result.summary else "skipped",
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            comments_posted=result.comments_count,
            parse_tier=result.parse_tier,
            summary=result.summary or "No reviewable changes",
        )

    except ValueError as e:
        return ReviewResponse(status="error", error=str(e))
    except Exception as e:
        logger.exception(f"Review failed: {e}")
        return ReviewResponse(status="error", error=str(e))


async def run_review(owner: str, repo: str, pr_number: int, automatic: bool = False):
    """Background task to run the review."""
    settings = get_settings()
    github = GitHubClient(token=settings.github_token, api_url=settings.github_api_url)

    provider = get_provider(settings)
    if not provider:
        logger.error("No LLM provider configured")
        return

    engine = build_engine(settings, github, provider)

    try:
        await engine.review_pr(owner=owner, repo=repo, pr_number=pr_number, automatic=automatic)
        logger.info(f"Review completed for {owner}/{repo}#{pr_number}")
    except Exception as e:
        logger.exception(f"Review failed for {owner}/{repo}#{pr_number}: {e}")
