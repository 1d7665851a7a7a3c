"""Publish a comment as a pull request on the site repository.

Strictly sequential: repository -> base branch -> new branch -> file ->
pull request. Each step takes the typed result of the previous ones. No
step is retried: branch creation is not idempotent, and a failure after it
leaves an orphaned branch for manual cleanup.
"""

import logging

from commentpr.adapters.base import GitPlatformAdapter, GitPlatformError
from commentpr.config import AppConfig
from commentpr.models import PR, BranchRef, Comment, Committer, FileCommit, PublishResult, Repository
from commentpr.services.record import commit_message, pull_request_body, serialize_comment

BRANCH_PREFIX = "comment-"

LOG = logging.getLogger("commentpr.services.publisher")


def branch_name(comment: Comment) -> str:
    return f"{BRANCH_PREFIX}{comment.id}"


def record_path(folder: str, comment: Comment, extension: str = "yml") -> str:
    """{folder}/{post_id}/{id}.{extension}"""
    folder = folder.strip("/")
    name = f"{comment.id}.{extension.lstrip('.')}"
    return f"{folder}/{comment.post_id}/{name}" if folder else f"{comment.post_id}/{name}"


class CommentPublisher:
    """Runs the branch/file/pull request pipeline against one git host."""

    def __init__(self, adapter: GitPlatformAdapter, config: AppConfig) -> None:
        self.adapter = adapter
        self.config = config

    def resolve_repository(self) -> Repository:
        return self.adapter.get_repository(self.config.github.repository)

    def resolve_base_branch(self, repo: Repository) -> BranchRef:
        """Configured target branch, else the repository default."""
        return self.adapter.get_branch(repo, self.config.github.branch or repo.default_branch)

    def create_branch(self, repo: Repository, base: BranchRef, comment: Comment) -> BranchRef:
        """Create comment-{id} at the base head; fails if it already exists."""
        return self.adapter.create_branch(repo, branch_name(comment), base.sha)

    def create_file(self, repo: Repository, branch: BranchRef, comment: Comment) -> FileCommit:
        comments = self.config.comments
        committer = Committer(
            name=comment.name,
            email=comment.email or comments.fallback_email,
            date=comment.date,
        )
        return self.adapter.create_file(
            repo,
            record_path(comments.folder, comment, comments.extension),
            serialize_comment(comment),
            commit_message(comment),
            branch,
            committer,
        )

    def open_pull_request(self, repo: Repository, base: BranchRef, branch: BranchRef, comment: Comment) -> PR:
        return self.adapter.create_pr(
            repo,
            title=commit_message(comment),
            body=pull_request_body(comment),
            head=branch.name,
            base=base.name,
        )

    def publish(self, comment: Comment) -> PublishResult:
        """Publish the comment; any GitPlatformError propagates."""
        repo = self.resolve_repository()
        base = self.resolve_base_branch(repo)
        branch = self.create_branch(repo, base, comment)
        LOG.debug("Created %s at %s in %s", branch.ref, base.sha, repo.full_name)
        try:
            file = self.create_file(repo, branch, comment)
            pr = self.open_pull_request(repo, base, branch, comment)
        except GitPlatformError:
            LOG.error("Branch %s left without a pull request in %s", branch.name, repo.full_name)
            raise
        LOG.info("Comment %s on %s published as PR #%s", comment.id, comment.post_id, pr.number)
        return PublishResult(repository=repo, base_branch=base, branch=branch, file=file, pull_request=pr)
