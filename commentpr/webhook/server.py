"""HTTP server for comment form posts.

Serves the comment POST path, a warm-up path and a health check.
"""

import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any

from commentpr.adapters import GitHubAdapter, GitPlatformError
from commentpr.config import AppConfig
from commentpr.services.publisher import CommentPublisher
from commentpr.services.sentiment import SentimentAnalyzer
from commentpr.webhook.handlers import CommentHandler, FormDataMissing, HandlerResponse, parse_form

LOG = logging.getLogger("commentpr.webhook")

PUBLISH_FAILED = "Failed to publish comment."
INVALID_LENGTH = "Invalid Content-Length."


class CommentRequestHandler(BaseHTTPRequestHandler):
    """Handle POST {comment_path}, GET {warmup_path} and GET /health."""

    config: AppConfig
    comment_handler: CommentHandler

    def _path(self) -> str:
        return self.path.split("?", 1)[0]

    def do_GET(self) -> None:
        path = self._path()
        if path == self.config.server.warmup_path:
            self._send(HandlerResponse(status=200))
            return
        if path == "/health" or path == "/":
            body = json.dumps({"status": "ok", "service": "commentpr"}).encode()
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            return
        self._send(HandlerResponse(status=404))

    def _content_length(self) -> int | None:
        raw = self.headers.get("Content-Length", "0").strip() or "0"
        try:
            length = int(raw)
        except ValueError:
            return None
        return length if length >= 0 else None

    def do_POST(self) -> None:
        length = self._content_length()
        if length is None:
            # Body size unknown, so the connection cannot be reused
            self.close_connection = True
            self._send(HandlerResponse(status=400, body=INVALID_LENGTH))
            return
        body = self.rfile.read(length) if length else b""
        if self._path() == self.config.server.comment_path:
            self._handle_comment(body)
            return
        self._send(HandlerResponse(status=404))

    def _handle_comment(self, body: bytes) -> None:
        try:
            form = parse_form(body, self.headers.get("Content-Type"))
            response = self.comment_handler.handle(form)
        except FormDataMissing as e:
            response = HandlerResponse(status=400, body=str(e))
        except GitPlatformError as e:
            LOG.error("Publishing failed (transient=%s): %s", e.transient, e)
            response = HandlerResponse(status=500, body=PUBLISH_FAILED)
        except Exception as e:
            LOG.exception("Unhandled error while handling comment: %s", e)
            response = HandlerResponse(status=500, body=PUBLISH_FAILED)
        self._send(response)

    def _send(self, response: HandlerResponse) -> None:
        payload = response.body.encode("utf-8")
        self.send_response(response.status)
        if response.location:
            self.send_header("Location", response.location)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if payload:
            self.wfile.write(payload)

    def log_message(self, format: str, *args: Any) -> None:
        LOG.debug(format, *args)


def make_comment_handler(config: AppConfig) -> CommentHandler:
    """Wire GitHub adapter, sentiment analyzer and publisher from config."""
    adapter = GitHubAdapter(
        token=config.github_token_resolved,
        api_url=config.github.api_url,
        timeout=config.github.timeout,
    )
    analyzer = SentimentAnalyzer(config.sentiment, subscription_key=config.sentiment_key_resolved)
    if not analyzer.configured:
        LOG.info("Sentiment analysis not configured")
    return CommentHandler(config, analyzer, CommentPublisher(adapter, config))


def make_server(config: AppConfig, comment_handler: CommentHandler | None = None) -> HTTPServer:
    """Bind the server; each server gets its own handler class.

    Requests are served one at a time, so the adapter and analyzer sessions
    are never used from two threads.
    """
    handler_cls = type(
        "BoundCommentRequestHandler",
        (CommentRequestHandler,),
        {
            "config": config,
            "comment_handler": comment_handler or make_comment_handler(config),
        },
    )
    return HTTPServer((config.server.host, config.server.port), handler_cls)


def run_server(config: AppConfig) -> None:
    """Run HTTP server for comment posts and health check."""
    server = make_server(config)
    LOG.info("Comment server listening on %s:%s", config.server.host, server.server_address[1])
    try:
        server.serve_forever()
    finally:
        server.server_close()
