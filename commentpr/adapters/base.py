"""Abstract base class for Git platform adapters."""

from abc import ABC, abstractmethod

from commentpr.models import PR, BranchRef, Committer, FileCommit, Repository


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails.

    ``transient`` marks network errors, timeouts and 5xx responses.
    """

    def __init__(self, message: str, status_code: int | None = None, transient: bool = False) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.transient = transient


class BranchExistsError(GitPlatformError):
    """Raised when the branch to create already exists."""

    pass


class GitPlatformAdapter(ABC):
    """Remote repository operations needed to publish a comment."""

    @abstractmethod
    def get_repository(self, identifier: str) -> Repository:
        """Fetch a repository.

        Args:
            identifier: owner/name, or the numeric repository id

        Returns:
            Repository instance

        Raises:
            GitPlatformError: If the API call fails or repository not found
        """
        ...

    @abstractmethod
    def get_branch(self, repo: Repository, name: str) -> BranchRef:
        """Fetch a branch and the sha of its head commit."""
        ...

    @abstractmethod
    def create_branch(self, repo: Repository, name: str, sha: str) -> BranchRef:
        """Create branch ``name`` pointing at commit ``sha``.

        Raises:
            BranchExistsError: If a branch with that name already exists
        """
        ...

    @abstractmethod
    def create_file(
        self,
        repo: Repository,
        path: str,
        content: str,
        message: str,
        branch: BranchRef,
        committer: Committer,
    ) -> FileCommit:
        """Commit a new file on a branch."""
        ...

    @abstractmethod
    def create_pr(self, repo: Repository, title: str, body: str, head: str, base: str) -> PR:
        """Create a pull request from head branch to base branch."""
        ...
