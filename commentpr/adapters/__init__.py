"""Git platform adapters."""

from commentpr.adapters.base import BranchExistsError, GitPlatformAdapter, GitPlatformError
from commentpr.adapters.github import GitHubAdapter

__all__ = ["BranchExistsError", "GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]
