"""Data models for comment submissions and git host objects (Pydantic)."""

from commentpr.models.comment import Comment, CommentForm
from commentpr.models.git import PR, BranchRef, Committer, FileCommit, PublishResult, Repository

__all__ = [
    "BranchRef",
    "Comment",
    "CommentForm",
    "Committer",
    "FileCommit",
    "PR",
    "PublishResult",
    "Repository",
]
