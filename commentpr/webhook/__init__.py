"""HTTP endpoint receiving comment form posts."""

from commentpr.webhook.handlers import CommentHandler, HandlerResponse, parse_form
from commentpr.webhook.server import run_server

__all__ = ["CommentHandler", "HandlerResponse", "parse_form", "run_server"]
