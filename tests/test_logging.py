"""Tests for commentpr.logging (CommentLogging, level/format from config)."""

import logging
from unittest.mock import patch

import pytest
import requests

from commentpr.config import LoggingConfig, SentimentConfig
from commentpr.logging import DEFAULT_FORMAT, LEVELS, NOISY_LOGGERS, PACKAGE_LOGGER, CommentLogging, _resolve_level
from commentpr.services.sentiment import UNAVAILABLE, SentimentAnalyzer


class TestResolveLevel:
    """_resolve_level maps level names to logging constants."""

    def test_known_levels(self) -> None:
        for name, value in LEVELS.items():
            assert _resolve_level(name) == value

    def test_case_and_whitespace_normalized(self) -> None:
        assert _resolve_level("  debug\t") == logging.DEBUG

    def test_unknown_level_returns_info(self) -> None:
        """Unknown names (including CRITICAL, not supported) fall back to
        INFO."""
        assert _resolve_level("TRACE") == logging.INFO
        assert _resolve_level("CRITICAL") == logging.INFO
        assert _resolve_level("") == logging.INFO


class TestCommentLogging:
    """CommentLogging applies LoggingConfig to the root logger."""

    def test_setup_sets_root_level(self) -> None:
        CommentLogging(LoggingConfig(level="WARNING", format="%(message)s")).setup()
        assert logging.root.level == logging.WARNING

    def test_setup_applies_format(self) -> None:
        custom = "%(name)s | %(message)s"
        CommentLogging(LoggingConfig(level="INFO", format=custom)).setup()
        assert logging.root.handlers[0].formatter._fmt == custom

    def test_empty_format_uses_default(self) -> None:
        CommentLogging(LoggingConfig(level="INFO", format="")).setup()
        assert logging.root.handlers[0].formatter._fmt == DEFAULT_FORMAT

    def test_setup_returns_package_logger(self) -> None:
        log = CommentLogging(LoggingConfig()).setup()
        assert log.name == PACKAGE_LOGGER
        assert log.getChild("webhook") is logging.getLogger("commentpr.webhook")

    def test_http_client_loggers_quiet_above_debug(self) -> None:
        CommentLogging(LoggingConfig(level="INFO")).setup()
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_http_client_loggers_follow_debug(self) -> None:
        CommentLogging(LoggingConfig(level="DEBUG")).setup()
        assert logging.getLogger("urllib3").level == logging.DEBUG
        assert logging.getLogger("urllib3.connectionpool").isEnabledFor(logging.DEBUG)


def test_sentiment_failure_logged_as_warning(caplog: pytest.LogCaptureFixture) -> None:
    """Degraded sentiment is visible in logs at WARNING."""
    analyzer = SentimentAnalyzer(SentimentConfig(subscription_key="k", region="eu"))
    with patch.object(analyzer._session, "post", side_effect=requests.Timeout("slow")):
        with caplog.at_level(logging.WARNING, logger="commentpr.services.sentiment"):
            assert analyzer.analyze("text") == UNAVAILABLE
    assert any("Sentiment analysis failed" in r.getMessage() for r in caplog.records)
