"""Comment identity: path-safe post id, deterministic comment id, gravatar.

The comment id is the first 4 bytes of SHA-256 over the normalized post id,
name, message and ISO capture time joined by the unit separator, as 8
lowercase hex digits. It is stable across processes and doubles as branch
suffix and file name.
"""

import hashlib
import re
from datetime import UTC, datetime

from commentpr.models import Comment, CommentForm

# Valid characters when mapping from the blog post slug to a file path
INVALID_PATH_CHARS = re.compile(r"[^a-zA-Z0-9-]")

ID_BYTES = 4
FIELD_SEPARATOR = "\x1f"
GRAVATAR_URL = "https://www.gravatar.com/avatar/{hash}?s={size}&d=identicon"


def normalize_post_id(post_id: str) -> str:
    """Replace every character outside [a-zA-Z0-9-] with '-'."""
    return INVALID_PATH_CHARS.sub("-", post_id)


def capture_time(now: datetime | None = None) -> datetime:
    """UTC submission time truncated to whole seconds."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(UTC).replace(microsecond=0)


def compute_comment_id(post_id: str, name: str, message: str, date: datetime) -> str:
    payload = FIELD_SEPARATOR.join((post_id, name, message, date.isoformat()))
    return hashlib.sha256(payload.encode("utf-8")).digest()[:ID_BYTES].hex()


def gravatar_hash(email: str) -> str:
    """Lowercase hex MD5 of the email as given."""
    return hashlib.md5(email.encode("utf-8")).hexdigest()


def gravatar_url(email_hash: str, size: int = 64) -> str:
    return GRAVATAR_URL.format(hash=email_hash, size=size)


def build_comment(fields: CommentForm, date: datetime, score: str) -> Comment:
    """Construct the Comment for validated form fields.

    The id is computed here, once, before anything is sent to the git host.
    """
    post_id = normalize_post_id(fields.post_id)
    gravatar = gravatar_hash(fields.email) if fields.email and not fields.avatar else None
    return Comment(
        id=compute_comment_id(post_id, fields.name, fields.message, date),
        post_id=post_id,
        name=fields.name,
        message=fields.message,
        date=date,
        email=fields.email,
        url=fields.url,
        avatar=fields.avatar,
        gravatar=gravatar,
        score=score,
    )
