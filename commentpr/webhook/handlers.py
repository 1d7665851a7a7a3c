"""Handle a comment form post.

Validates the form, builds the Comment and publishes it. Maps the outcome
to a status code, body and optional redirect. Publishing errors are not
caught here; the server turns them into a 500.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Callable, Dict, Mapping
from urllib.parse import parse_qs

from commentpr.config import AppConfig
from commentpr.services.form_validator import is_absolute_url, validate_form
from commentpr.services.identity import build_comment, capture_time
from commentpr.services.publisher import CommentPublisher
from commentpr.services.sentiment import SentimentAnalyzer

LOG = logging.getLogger("commentpr.webhook.handlers")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class FormDataMissing(ValueError):
    """Raised when the request body is not a url-encoded form."""

    pass


@dataclass
class HandlerResponse:
    status: int
    body: str = ""
    location: str | None = None


def parse_form(body: bytes, content_type: str | None) -> Dict[str, str]:
    """Decode a url-encoded form body into a flat field mapping (first value
    wins)."""
    if not content_type or FORM_CONTENT_TYPE not in content_type.lower():
        raise FormDataMissing("Form data is missing.")
    parsed = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items() if values}


class CommentHandler:
    """Turns a submitted form into a published comment."""

    def __init__(
        self,
        config: AppConfig,
        analyzer: SentimentAnalyzer,
        publisher: CommentPublisher,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.analyzer = analyzer
        self.publisher = publisher
        self._clock = clock or (lambda: datetime.now(UTC))

    def handle(self, form: Mapping[str, str]) -> HandlerResponse:
        result = validate_form(
            form,
            allowed_site=self.config.allowed_site,
            require_email=self.config.comments.require_email,
        )
        if not result.ok:
            LOG.info("Rejected comment: %s", "; ".join(result.errors))
            return HandlerResponse(status=400, body="\n".join(result.errors))

        fields = result.fields
        date = capture_time(self._clock())
        score = self.analyzer.analyze(fields.message)
        comment = build_comment(fields, date, score)
        LOG.info("Accepted comment %s by %s on %s", comment.id, comment.name, comment.post_id)

        self.publisher.publish(comment)

        if is_absolute_url(fields.redirect):
            return HandlerResponse(status=302, location=fields.redirect)
        return HandlerResponse(status=200)
