# tests/integration/test_github_client.py
import json
import httpx
import pytest
from review_assistant.platforms.github import GitHubClient


API = "https://api.github.com/repos/acme/app"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_list_pull_files_follows_pagination(httpx_mock):
    first_page = [{"filename": f"f{i}.py", "status": "modified", "patch": "@@ -1 +1 @@"} for i in range(100)]
    httpx_mock.add_response(url=f"{API}/pulls/45/files?per_page=100&page=1", json=first_page)
    httpx_mock.add_response(url=f"{API}/pulls/45/files?per_page=100&page=2", json=[{"filename": "last.py"}])

    client = GitHubClient(token="test-token")
    files = await client.list_pull_files("acme", "app", 45)

    assert len(files) == 101
    assert files[-1]["filename"] == "last.py"
    assert httpx_mock.get_requests()[0].headers["Authorization"] == "Bearer test-token"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_pull_diff_requests_diff_media_type(httpx_mock):
    httpx_mock.add_response(url=f"{API}/pulls/45", text="--- a/x\n+++ b/x\n")

    client = GitHubClient(token="test-token")
    diff = await client.get_pull_diff("acme", "app", 45)

    assert diff.startswith("--- a/x")
    assert httpx_mock.get_request().headers["Accept"] == "application/vnd.github.v3.diff"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_file_content(httpx_mock):
    httpx_mock.add_response(
        url=f"{API}/contents/src/main.py?ref=feature-branch",
        text="print('hello world')",
    )

    client = GitHubClient(token="test-token")
    content = await client.get_file_content("acme", "app", "src/main.py", "feature-branch")

    assert content == "print('hello world')"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_repo_config_missing_returns_none(httpx_mock):
    httpx_mock.add_response(url=f"{API}/contents/.ai-review.yaml?ref=abc", status_code=404)

    client = GitHubClient(token="test-token")

    assert await client.get_repo_config("acme", "app", "abc") is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_repo_config_propagates_other_errors(httpx_mock):
    httpx_mock.add_response(url=f"{API}/contents/.ai-review.yaml?ref=abc", status_code=500)

    client = GitHubClient(token="test-token")

    with pytest.raises(httpx.HTTPStatusError):
        await client.get_repo_config("acme", "app", "abc")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_review(httpx_mock):
    httpx_mock.add_response(url=f"{API}/pulls/45/reviews", json={"id": 1})

    client = GitHubClient(token="test-token")
    await client.create_review(
        "acme",
        "app",
        45,
        commit_id="def456",
        body="# AI Code Review - line comments",
        comments=[{"path": "src/main.py", "line": 10, "side": "RIGHT", "body": "Consider error handling"}],
    )

    payload = json.loads(httpx_mock.get_request().content)
    assert payload["event"] == "COMMENT"
    assert payload["commit_id"] == "def456"
    assert payload["comments"][0]["line"] == 10


@pytest.mark.integration
@pytest.mark.asyncio
async def test_post_issue_comment(httpx_mock):
    httpx_mock.add_response(url=f"{API}/issues/45/comments", status_code=201, json={"id": 2})

    client = GitHubClient(token="test-token")
    await client.post_issue_comment("acme", "app", 45, "# AI Code Review\n\nLGTM")

    assert json.loads(httpx_mock.get_request().content) == {"body": "# AI Code Review\n\nLGTM"}
