"""Render a Comment as the YAML record committed to the site repository,
plus the commit message and pull request body that go with it."""

import html
from typing import Any, Dict

import yaml

from commentpr.models import Comment
from commentpr.services.identity import gravatar_url

DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _single_line(value: str) -> str:
    return " ".join(value.split())


def comment_record(comment: Comment) -> Dict[str, Any]:
    """Ordered record fields; optional fields only when present."""
    record: Dict[str, Any] = {"id": comment.id, "name": comment.name}
    if comment.email:
        record["email"] = comment.email
    if comment.gravatar:
        record["gravatar"] = comment.gravatar
    if comment.avatar:
        record["avatar"] = comment.avatar
    if comment.url:
        record["url"] = comment.url
    record["date"] = comment.date.strftime(DATE_FORMAT)
    record["score"] = comment.score
    record["message"] = comment.message
    return record


def serialize_comment(comment: Comment) -> str:
    """YAML document for the comment; yaml.safe_load returns the same values."""
    return yaml.safe_dump(
        comment_record(comment),
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=1000,
    )


def commit_message(comment: Comment) -> str:
    """One-line commit message, also used as the PR title."""
    return f"Comment by {_single_line(comment.name)} on {comment.post_id}"


def avatar_src(comment: Comment) -> str | None:
    if comment.avatar:
        return comment.avatar
    if comment.gravatar:
        return gravatar_url(comment.gravatar)
    return None


def pull_request_body(comment: Comment) -> str:
    """Markdown body: avatar, sentiment score, then the message."""
    lines = []
    src = avatar_src(comment)
    if src:
        lines.append(f'avatar: <img src="{html.escape(src, quote=True)}" width="64" height="64" />')
        lines.append("")
    lines.append(f"score: {comment.score}")
    lines.append("")
    lines.append(comment.message)
    return "\n".join(lines)
