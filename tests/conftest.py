"""Shared fixtures: an in-memory git host."""

from typing import Dict, List

import pytest

from commentpr.adapters.base import BranchExistsError, GitPlatformAdapter, GitPlatformError
from commentpr.models import PR, BranchRef, Committer, FileCommit, Repository


class FakeGitHost(GitPlatformAdapter):
    """Keeps refs, files and PRs in memory; ref creation is atomic."""

    def __init__(self, default_branch: str = "main") -> None:
        self.repo = Repository(id=1, full_name="owner/blog", default_branch=default_branch)
        self.refs: Dict[str, str] = {"main": "sha-main", "gh-pages": "sha-pages"}
        self.files: Dict[tuple, dict] = {}
        self.prs: List[PR] = []
        self.calls: List[str] = []
        self.fail_on: str | None = None

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise GitPlatformError(f"{name} failed", status_code=502, transient=True)

    def get_repository(self, identifier: str) -> Repository:
        self._call("get_repository")
        if identifier not in ("owner/blog", "1"):
            raise GitPlatformError(f"Not found: {identifier}", status_code=404)
        return self.repo

    def get_branch(self, repo: Repository, name: str) -> BranchRef:
        self._call("get_branch")
        if name not in self.refs:
            raise GitPlatformError(f"Not found: {name}", status_code=404)
        return BranchRef(name=name, ref=f"refs/heads/{name}", sha=self.refs[name])

    def create_branch(self, repo: Repository, name: str, sha: str) -> BranchRef:
        self._call("create_branch")
        if name in self.refs:
            raise BranchExistsError(f"Branch {name} already exists", status_code=422)
        self.refs[name] = sha
        return BranchRef(name=name, ref=f"refs/heads/{name}", sha=sha)

    def create_file(
        self,
        repo: Repository,
        path: str,
        content: str,
        message: str,
        branch: BranchRef,
        committer: Committer,
    ) -> FileCommit:
        self._call("create_file")
        self.files[(branch.name, path)] = {"content": content, "message": message, "committer": committer}
        return FileCommit(path=path, branch=branch.name, sha=f"commit-{len(self.files)}")

    def create_pr(self, repo: Repository, title: str, body: str, head: str, base: str) -> PR:
        self._call("create_pr")
        pr = PR(number=len(self.prs) + 1, title=title, body=body, head_branch=head, base_branch=base, state="open")
        self.prs.append(pr)
        return pr


@pytest.fixture
def host() -> FakeGitHost:
    return FakeGitHost()
