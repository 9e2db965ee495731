from pydantic import BaseModel


class GitHubUser(BaseModel):
    login: str


class GitHubRepositoryOwner(BaseModel):
    login: str


class GitHubRepository(BaseModel):
    name: str
    full_name: str
    owner: GitHubRepositoryOwner


class GitHubBranchRef(BaseModel):
    ref: str
    sha: str


class GitHubPullRequest(BaseModel):
    number: int
    title: str
    body: str | None = None
    state: str
    head: GitHubBranchRef
    base: GitHubBranchRef


class GitHubPullRequestEvent(BaseModel):
    action: str
    number: int
    pull_request: GitHubPullRequest
    repository: GitHubRepository
    sender: GitHubUser


class GitHubIssuePullRequestLink(BaseModel):
    url: str


class GitHubIssue(BaseModel):
    number: int
    pull_request: GitHubIssuePullRequestLink | None = None


class GitHubComment(BaseModel):
    body: str
    user: GitHubUser


class GitHubIssueCommentEvent(BaseModel):
    action: str
    issue: GitHubIssue
    comment: GitHubComment
    repository: GitHubRepository
