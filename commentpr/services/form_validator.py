"""Validate a submitted comment form.

Fields are declared once in FORM_FIELDS. Every check runs so the caller
gets the complete list of errors in one response.
"""

import re
from dataclasses import dataclass, field
from typing import List, Mapping, Tuple
from urllib.parse import urlsplit

from commentpr.models import CommentForm

# Simplest form of email validation
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
HOST_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9.-]*[a-zA-Z0-9])?$")

TEXT = "text"
EMAIL = "email"
URI = "uri"


@dataclass(frozen=True)
class FormField:
    """One accepted form field."""

    name: str
    attr: str
    required: bool = False
    kind: str = TEXT
    aliases: Tuple[str, ...] = ()


FORM_FIELDS: Tuple[FormField, ...] = (
    FormField("post_id", "post_id", required=True),
    FormField("message", "message", required=True, aliases=("comment",)),
    FormField("name", "name", required=True, aliases=("author",)),
    FormField("email", "email", kind=EMAIL),
    FormField("url", "url", kind=URI),
    FormField("avatar", "avatar", kind=URI),
    FormField("comment-site", "comment_site"),
    FormField("redirect", "redirect"),
)


@dataclass
class ValidationResult:
    """Validated fields, or the errors that prevented validation."""

    fields: CommentForm | None = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.fields is not None and not self.errors


def is_absolute_url(value: str | None) -> bool:
    """True if value has a scheme and a network location."""
    if not value or any(c.isspace() for c in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def _host(value: str | None) -> str | None:
    if not is_absolute_url(value):
        return None
    try:
        return urlsplit(value).hostname
    except ValueError:
        return None


def _allowed_host(value: str | None) -> str | None:
    """Host of the configured site, given as a URL or a bare host name.

    A bare host may carry a port (``localhost:4000``); the port is ignored.
    """
    if not value:
        return None
    value = value.strip()
    if "://" in value:
        return _host(value)
    try:
        host = urlsplit(f"//{value}").hostname
    except ValueError:
        return None
    return host if host and HOST_RE.match(host) else None


def same_site(allowed_site: str | None, posted_site: str | None) -> bool:
    """Compare the host of both sites, case-insensitively.

    Either side missing or unparsable is a mismatch.
    """
    allowed = _allowed_host(allowed_site)
    posted = _host(posted_site)
    return allowed is not None and posted is not None and allowed.lower() == posted.lower()


def origin_error(posted_site: str | None) -> str:
    return (
        f"This comments receiver does not handle forms for '{posted_site or ''}'. "
        "You should point to your own instance."
    )


def _lookup(form: Mapping[str, str], spec: FormField) -> str | None:
    for key in (spec.name, *spec.aliases):
        raw = form.get(key)
        if raw is not None and raw.strip():
            return raw.strip()
    return None


def validate_form(
    form: Mapping[str, str],
    allowed_site: str | None = None,
    require_email: bool = True,
) -> ValidationResult:
    """Check required fields, email shape, URL fields and the posting site.

    Args:
        form: Raw form values by field name
        allowed_site: URL of the site allowed to post; None disables the check
        require_email: Treat email as a required field

    Returns:
        ValidationResult with fields set only when errors is empty
    """
    values = {spec.attr: _lookup(form, spec) for spec in FORM_FIELDS}
    errors: List[str] = []

    if allowed_site and not same_site(allowed_site, values["comment_site"]):
        errors.append(origin_error(values["comment_site"]))

    for spec in FORM_FIELDS:
        required = spec.required or (spec.kind == EMAIL and require_email)
        if required and values[spec.attr] is None:
            errors.append(f"Form value missing for {spec.name}")

    for spec in FORM_FIELDS:
        value = values[spec.attr]
        if value is None:
            continue
        if spec.kind == EMAIL and not is_valid_email(value):
            errors.append(f"{spec.name} not in correct format")
        elif spec.kind == URI and not is_absolute_url(value):
            errors.append(f"Form value '{spec.name}' is not a valid absolute URL")

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(fields=CommentForm(**values))
