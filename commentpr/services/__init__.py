"""Comment pipeline: validate, identify, score, serialize, publish."""

from commentpr.services.form_validator import ValidationResult, validate_form
from commentpr.services.identity import build_comment, capture_time
from commentpr.services.publisher import CommentPublisher
from commentpr.services.record import serialize_comment
from commentpr.services.sentiment import NOT_CONFIGURED, UNAVAILABLE, SentimentAnalyzer

__all__ = [
    "CommentPublisher",
    "NOT_CONFIGURED",
    "SentimentAnalyzer",
    "UNAVAILABLE",
    "ValidationResult",
    "build_comment",
    "capture_time",
    "serialize_comment",
    "validate_form",
]
