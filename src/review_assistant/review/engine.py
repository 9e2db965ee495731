# src/review_assistant/review/engine.py
import fnmatch
import logging
import re
import yaml
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from review_assistant.models.config import FilterConfig, Priority, RepoConfig
from review_assistant.models.review import (
    ReviewComment,
    StructuredReview,
    generation_error_summary,
    is_failure_summary,
)
from review_assistant.platforms.github import GitHubClient
from review_assistant.providers.base import LLMProvider
from .diff import diff_ranges, parse_diff
from .pipeline import ReviewPipeline
from .prompts import ReviewFile, build_review_prompt


logger = logging.getLogger(__name__)


@dataclass
class EngineReviewResult:
    """Result of running review on a pull request."""
    comments_count: int
    summary: str
    parse_tier: str | None = None
    published: bool = False


PRIORITY_BADGES = {
    Priority.CRITICAL: "🚨",
    Priority.HIGH: "⚠️",
    Priority.MEDIUM: "💡",
    Priority.LOW: "ℹ️",
}


class ReviewEngine:
    def __init__(
        self,
        platform: GitHubClient,
        provider: LLMProvider,
        filter_config: FilterConfig | None = None,
        reviewer_name: str = "AI Code Review",
        language: str = "en",
        max_files: int = 50,
        log_dir: str | None = None,
    ):
        self.platform = platform
        self.provider = provider
        self.filter_config = filter_config or FilterConfig()
        self.reviewer_name = reviewer_name
        self.language = language
        self.max_files = max_files
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    async def review_pr(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        automatic: bool = False,
    ) -> EngineReviewResult:
        """Run AI review on a pull request and publish the result."""
        pr = await self.platform.get_pull_request(owner, repo, pr_number)
        head_sha = pr["head"]["sha"]

        config = await self._load_config(owner, repo, head_sha)
        if automatic and not config.auto_review:
            logger.info(f"Automatic review disabled by .ai-review.yaml for {owner}/{repo}#{pr_number}")
            return EngineReviewResult(comments_count=0, summary="")

        changed = await self.platform.list_pull_files(owner, repo, pr_number)
        changed = [
            f for f in changed
            if f.get("status") != "removed" and not self._is_excluded(f["filename"], config.exclude)
        ]
        if len(changed) > self.max_files:
            logger.warning(f"Limiting review to {self.max_files} of {len(changed)} changed files")
            changed = changed[:self.max_files]

        if not changed:
            logger.info(f"No reviewable files in {owner}/{repo}#{pr_number}")
            return EngineReviewResult(comments_count=0, summary="")

        files = []
        for change in changed:
            file_path = change["filename"]
            try:
                content = await self.platform.get_file_content(owner, repo, file_path, head_sha)
            except Exception as e:
                logger.warning(f"Could not get file content for {file_path}: {e}")
                content = ""
            files.append(ReviewFile(path=file_path, patch=change.get("patch") or "", content=content))

        prompt = build_review_prompt(
            title=pr.get("title", ""),
            files=files,
            language=config.language or self.language,
            description=pr.get("body") or "",
        )

        diff_text = await self.platform.get_pull_diff(owner, repo, pr_number)
        reviewed = {f.path for f in files}
        ranges = {path: r for path, r in diff_ranges(parse_diff(diff_text)).items() if path in reviewed}

        pipeline = ReviewPipeline(
            config.filter_config(self.filter_config.min_priority, self.filter_config.max_comments)
        )

        try:
            raw_text = await self.provider.complete(prompt)
        except Exception as e:
            logger.error(f"LLM review failed for {owner}/{repo}#{pr_number}: {e}")
            review = StructuredReview(summary=generation_error_summary(str(e)))
            tier = None
            raw_text = ""
        else:
            result = pipeline.run(raw_text, ranges)
            review = result.review
            tier = result.tier.value if result.tier else None
            logger.info(
                f"Parsed review for {owner}/{repo}#{pr_number} via '{tier}': "
                f"{result.parsed_comments} comments parsed, {len(review.comments)} kept"
            )

        self._save_review_log(owner, repo, pr_number, prompt, raw_text)

        published = await self.publish(owner, repo, pr_number, head_sha, review)

        return EngineReviewResult(
            comments_count=len(review.comments) if published else 0,
            summary=review.summary,
            parse_tier=tier,
            published=published,
        )

    async def publish(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        head_sha: str,
        review: StructuredReview,
    ) -> bool:
        """Post the summary note and line comments. Returns False when suppressed."""
        if is_failure_summary(review.summary):
            logger.warning(f"Skipping publication for {owner}/{repo}#{pr_number}: {review.summary}")
            return False

        await self.platform.post_issue_comment(
            owner, repo, pr_number, f"# {self.reviewer_name}\n\n{review.summary}"
        )

        if not review.comments:
            logger.info("No line-specific comments to post, skipping review creation")
            return True

        try:
            await self.platform.create_review(
                owner,
                repo,
                pr_number,
                commit_id=head_sha,
                body=f"# {self.reviewer_name} - line comments",
                comments=[
                    {
                        "path": c.path,
                        "line": c.line,
                        "side": "RIGHT",
                        "body": self._format_comment(c),
                    }
                    for c in review.comments
                ],
            )
        except Exception as e:
            logger.error(f"Failed to post review comments, falling back to a single comment: {e}")
            details = "\n\n".join(f"- **{c.path}:{c.line}**: {c.body}" for c in review.comments)
            await self.platform.post_issue_comment(
                owner,
                repo,
                pr_number,
                f"# {self.reviewer_name}\n\n{review.summary}\n\n## Detailed comments\n\n{details}",
            )

        return True

    async def _load_config(self, owner: str, repo: str, ref: str) -> RepoConfig:
        """Load .ai-review.yaml from repo or use defaults."""
        yaml_content = await self.platform.get_repo_config(owner, repo, ref)
        if yaml_content is None:
            return RepoConfig()

        try:
            data = yaml.safe_load(yaml_content) or {}
            return RepoConfig(**data)
        except Exception as e:
            logger.warning(f"Invalid .ai-review.yaml: {e}")
            return RepoConfig()

    def _is_excluded(self, file_path: str, patterns: list[str]) -> bool:
        """Check if file matches any exclude pattern."""
        return any(fnmatch.fnmatch(file_path, pattern) for pattern in patterns)

    def _save_review_log(self, owner: str, repo: str, pr_number: int, prompt: str, raw_text: str) -> None:
        """Save the prompt (without file listings) and the raw response of one run."""
        if not self.log_dir:
            return
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_path = self.log_dir / f"{timestamp}_{owner}_{repo}_pr{pr_number}.txt"

            stripped = re.sub(
                r"(Full file with line numbers:\n```\n).*?(\n```)",
                r"\1[file content omitted]\2",
                prompt,
                flags=re.DOTALL,
            )
            header = f"Review: {owner}/{repo}#{pr_number}\nTime: {timestamp}\n\n"
            log_path.write_text(
                f"{header}{stripped}\n\n{'=' * 60}\nRESPONSE\n{'=' * 60}\n\n{raw_text}",
                encoding="utf-8",
            )
            logger.info(f"Review log saved: {log_path}")
        except Exception as e:
            logger.warning(f"Failed to save review log: {e}")

    def _format_comment(self, comment: ReviewComment) -> str:
        """Format comment for GitHub."""
        if comment.priority is None:
            return comment.body
        header = f"{PRIORITY_BADGES[comment.priority]} **{comment.priority.value}**"
        return f"{header}\n\n{comment.body}"
