"""Git host objects threaded through the publish pipeline."""

from datetime import datetime

from pydantic import BaseModel


class Repository(BaseModel):
    """Remote repository handle."""

    id: int
    full_name: str
    default_branch: str


class BranchRef(BaseModel):
    """Branch name, its full ref and the commit it points at."""

    name: str
    ref: str
    sha: str


class Committer(BaseModel):
    """Commit author/committer identity."""

    name: str
    email: str
    date: datetime


class FileCommit(BaseModel):
    """Result of creating a file on a branch."""

    path: str
    branch: str
    sha: str
    content_sha: str | None = None


class PR(BaseModel):
    """Pull request."""

    number: int
    title: str
    body: str = ""
    head_branch: str
    base_branch: str
    state: str
    html_url: str | None = None


class PublishResult(BaseModel):
    """Everything created for one published comment."""

    repository: Repository
    base_branch: BranchRef
    branch: BranchRef
    file: FileCommit
    pull_request: PR
