"""GitHub API adapter."""

import base64
import logging
from typing import Any, Dict
from urllib.parse import quote

import requests

from commentpr.adapters.base import BranchExistsError, GitPlatformAdapter, GitPlatformError
from commentpr.models import PR, BranchRef, Committer, FileCommit, Repository

LOG = logging.getLogger("commentpr.adapters.github")

HEADS_PREFIX = "refs/heads/"


def _repo_from_api(data: Dict[str, Any]) -> Repository:
    return Repository(
        id=data["id"],
        full_name=data["full_name"],
        default_branch=data.get("default_branch") or "main",
    )


def _pr_from_api(data: Dict[str, Any]) -> PR:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PR(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        head_branch=head.get("ref", ""),
        base_branch=base.get("ref", ""),
        state=data.get("state", "open"),
        html_url=data.get("html_url"),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation of GitPlatformAdapter."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        timeout: float = 30,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "commentpr",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.api_url}{path}"
        LOG.debug("%s %s", method, path)
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except (requests.Timeout, requests.ConnectionError) as e:
            raise GitPlatformError(f"GitHub API unreachable: {e}", transient=True) from e
        if resp.status_code == 404:
            raise GitPlatformError(f"Not found: {path}", status_code=404)
        if resp.status_code >= 400:
            msg = resp.text
            try:
                data = resp.json()
                if "message" in data:
                    msg = data["message"]
            except Exception:
                pass
            raise GitPlatformError(
                f"GitHub API error {resp.status_code}: {msg}",
                status_code=resp.status_code,
                transient=resp.status_code >= 500,
            )
        return resp

    def get_repository(self, identifier: str) -> Repository:
        """Fetch repository by owner/name or numeric id."""
        identifier = identifier.strip()
        path = f"/repositories/{identifier}" if identifier.isdigit() else f"/repos/{identifier}"
        return _repo_from_api(self._request("GET", path).json())

    def get_branch(self, repo: Repository, name: str) -> BranchRef:
        """Fetch branch and its head commit sha."""
        resp = self._request("GET", f"/repos/{repo.full_name}/branches/{quote(name, safe='')}")
        data = resp.json()
        sha = (data.get("commit") or {}).get("sha")
        if not sha:
            raise GitPlatformError(f"Could not get head commit of branch {name}")
        return BranchRef(name=data.get("name", name), ref=f"{HEADS_PREFIX}{name}", sha=sha)

    def create_branch(self, repo: Repository, name: str, sha: str) -> BranchRef:
        """Create refs/heads/{name} at sha; existing ref raises
        BranchExistsError."""
        ref = f"{HEADS_PREFIX}{name}"
        try:
            resp = self._request("POST", f"/repos/{repo.full_name}/git/refs", json={"ref": ref, "sha": sha})
        except GitPlatformError as e:
            if e.status_code == 422 and "already exists" in str(e).lower():
                raise BranchExistsError(f"Branch {name} already exists", status_code=422) from e
            raise
        data = resp.json()
        return BranchRef(
            name=name,
            ref=data.get("ref", ref),
            sha=(data.get("object") or {}).get("sha", sha),
        )

    def create_file(
        self,
        repo: Repository,
        path: str,
        content: str,
        message: str,
        branch: BranchRef,
        committer: Committer,
    ) -> FileCommit:
        """Create file via the contents API on the given branch."""
        identity = {
            "name": committer.name,
            "email": committer.email,
            "date": committer.date.strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        resp = self._request(
            "PUT",
            f"/repos/{repo.full_name}/contents/{quote(path)}",
            json={
                "message": message,
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
                "branch": branch.name,
                "committer": identity,
                "author": identity,
            },
        )
        data = resp.json()
        return FileCommit(
            path=(data.get("content") or {}).get("path", path),
            branch=branch.name,
            sha=(data.get("commit") or {}).get("sha", ""),
            content_sha=(data.get("content") or {}).get("sha"),
        )

    def create_pr(self, repo: Repository, title: str, body: str, head: str, base: str) -> PR:
        """Create a pull request."""
        resp = self._request(
            "POST",
            f"/repos/{repo.full_name}/pulls",
            json={"title": title, "head": head, "base": base, "body": body or ""},
        )
        data = resp.json()
        pr = _pr_from_api(data)
        if not pr.head_branch:
            pr.head_branch = head
        if not pr.base_branch:
            pr.base_branch = base
        return pr
