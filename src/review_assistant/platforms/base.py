from abc import ABC, abstractmethod
from typing import Any


class GitPlatform(ABC):
    @abstractmethod
    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> dict[str, Any]:
        pass

    @abstractmethod
    async def list_pull_files(self, owner: str, repo: str, pr_number: int) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def get_pull_diff(self, owner: str, repo: str, pr_number: int) -> str:
        pass

    @abstractmethod
    async def get_file_content(self, owner: str, repo: str, file_path: str, ref: str) -> str:
        pass

    @abstractmethod
    async def post_issue_comment(self, owner: str, repo: str, pr_number: int, body: str) -> None:
        pass

    @abstractmethod
    async def create_review(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_id: str,
        body: str,
        comments: list[dict[str, Any]],
    ) -> None:
        pass
