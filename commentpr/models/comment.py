"""Comment submission models."""

from datetime import datetime

from pydantic import BaseModel, Field


class CommentForm(BaseModel):
    """Form fields that passed validation (stripped, blanks as None)."""

    post_id: str
    message: str
    name: str
    email: str | None = None
    url: str | None = None
    avatar: str | None = None
    comment_site: str | None = None
    redirect: str | None = None


class Comment(BaseModel):
    """A validated, uniquely identified blog comment.

    Built once per request by ``build_comment``; the committed record in
    the content repository is its only durable form.
    """

    model_config = {"frozen": True}

    id: str = Field(..., description="8 hex digits derived from post_id, name, message and date")
    post_id: str = Field(..., pattern=r"^[a-zA-Z0-9-]+$", description="Post slug safe for a path segment")
    name: str
    message: str
    date: datetime = Field(..., description="UTC capture time, whole seconds")
    email: str | None = None
    url: str | None = None
    avatar: str | None = None
    gravatar: str | None = Field(default=None, description="MD5 of email when no avatar URL was given")
    score: str = Field(..., description="Sentiment score or a sentinel")
