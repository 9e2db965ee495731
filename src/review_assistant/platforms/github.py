from typing import Any
from urllib.parse import quote
import httpx
from .base import GitPlatform


class GitHubClient(GitPlatform):
    def __init__(self, token: str, api_url: str = "https://api.github.com"):
        self.token = token
        self.api_url = api_url.rstrip("/")

    def _headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}"

    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> dict[str, Any]:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                f"{self._repo_url(owner, repo)}/pulls/{pr_number}",
                headers=self._headers(),
                timeout=30.0,
            )
            response.raise_for_status()
            return response.json()

    async def list_pull_files(self, owner: str, repo: str, pr_number: int) -> list[dict[str, Any]]:
        """List every changed file of a PR, following pagination."""
        files: list[dict[str, Any]] = []
        page = 1
        async with httpx.AsyncClient() as client:
            while True:
                response = await client.get(
                    f"{self._repo_url(owner, repo)}/pulls/{pr_number}/files",
                    headers=self._headers(),
                    params={"per_page": 100, "page": page},
                    timeout=30.0,
                )
                response.raise_for_status()
                batch = response.json()
                if not batch:
                    break
                files.extend(batch)
                if len(batch) < 100:
                    break
                page += 1
        return files

    async def get_pull_diff(self, owner: str, repo: str, pr_number: int) -> str:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                f"{self._repo_url(owner, repo)}/pulls/{pr_number}",
                headers=self._headers(accept="application/vnd.github.v3.diff"),
                timeout=30.0,
            )
            response.raise_for_status()
            return response.text

    async def get_file_content(self, owner: str, repo: str, file_path: str, ref: str) -> str:
        encoded_path = quote(file_path, safe="/")
        async with httpx.AsyncClient() as client:
            response = await client.get(
                f"{self._repo_url(owner, repo)}/contents/{encoded_path}",
                params={"ref": ref},
                headers=self._headers(accept="application/vnd.github.raw+json"),
                timeout=30.0,
            )
            response.raise_for_status()
            return response.text

    async def get_repo_config(self, owner: str, repo: str, ref: str) -> str | None:
        """Get .ai-review.yaml content, returns None if not found."""
        try:
            return await self.get_file_content(owner, repo, ".ai-review.yaml", ref)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

    async def post_issue_comment(self, owner: str, repo: str, pr_number: int, body: str) -> None:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{self._repo_url(owner, repo)}/issues/{pr_number}/comments",
                headers=self._headers(),
                json={"body": body},
                timeout=30.0,
            )
            response.raise_for_status()

    async def create_review(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_id: str,
        body: str,
        comments: list[dict[str, Any]],
    ) -> None:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{self._repo_url(owner, repo)}/pulls/{pr_number}/reviews",
                headers=self._headers(),
                json={
                    "commit_id": commit_id,
                    "body": body,
                    "event": "COMMENT",
                    "comments": comments,
                },
                timeout=30.0,
            )
            response.raise_for_status()
