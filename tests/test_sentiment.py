"""Tests for the sentiment analyzer (mocked Text Analytics API)."""

from unittest.mock import Mock, patch

import pytest
import requests

from commentpr.config import SentimentConfig
from commentpr.services.sentiment import (
    NOT_CONFIGURED,
    UNAVAILABLE,
    SentimentAnalyzer,
    split_text,
)


@pytest.fixture
def analyzer() -> SentimentAnalyzer:
    return SentimentAnalyzer(SentimentConfig(subscription_key="key", region="westeurope", language="en"))


def _ok(data: object) -> Mock:
    resp = Mock()
    resp.status_code = 200
    resp.json.return_value = data
    resp.raise_for_status.return_value = None
    return resp


def test_not_configured_makes_no_request() -> None:
    """Without key or region the sentinel is returned and nothing is sent."""
    for config in (SentimentConfig(), SentimentConfig(subscription_key="key"), SentimentConfig(region="eu")):
        a = SentimentAnalyzer(config)
        with patch.object(a._session, "post") as post:
            assert a.analyze("text") == NOT_CONFIGURED
        post.assert_not_called()
        assert not a.configured


def test_placeholder_key_is_not_configured() -> None:
    """An unsubstituted ${VAR} from YAML disables the feature."""
    a = SentimentAnalyzer(SentimentConfig(subscription_key="${SENTIMENT_SUBSCRIPTION_KEY}", region="eu"))
    assert not a.configured


def test_explicit_key_overrides_config() -> None:
    a = SentimentAnalyzer(SentimentConfig(region="eu"), subscription_key="secret")
    assert a.configured
    assert a._session.headers["Ocp-Apim-Subscription-Key"] == "secret"


def test_analyze_success(analyzer: SentimentAnalyzer) -> None:
    """Score of document 0 formatted with two decimals."""
    with patch.object(analyzer._session, "post", return_value=_ok({"documents": [{"id": "0", "score": 0.8765}]})) as post:
        assert analyzer.analyze("I love it") == "0.88"
    url = post.call_args[0][0]
    assert url == "https://westeurope.api.cognitive.microsoft.com/text/analytics/v2.1/sentiment"
    body = post.call_args[1]["json"]
    assert body == {"documents": [{"language": "en", "id": "0", "text": "I love it"}]}
    assert post.call_args[1]["timeout"] == 10
    assert analyzer._session.headers["Ocp-Apim-Subscription-Key"] == "key"


def test_long_text_sent_as_chunks_in_one_call() -> None:
    """Text over the size limit becomes several documents in one batch."""
    a = SentimentAnalyzer(SentimentConfig(subscription_key="k", region="r", chunk_size=5000))
    text = "a" * 5000 + "b" * 5000 + "c" * 10
    data = {"documents": [{"id": "1", "score": 0.1}, {"id": "0", "score": 0.9}, {"id": "2", "score": 0.5}]}
    with patch.object(a._session, "post", return_value=_ok(data)) as post:
        assert a.analyze(text) == "0.90"
    post.assert_called_once()
    docs = post.call_args[1]["json"]["documents"]
    assert [d["id"] for d in docs] == ["0", "1", "2"]
    assert [len(d["text"]) for d in docs] == [5000, 5000, 10]
    assert "".join(d["text"] for d in docs) == text


def test_endpoint_override() -> None:
    a = SentimentAnalyzer(SentimentConfig(subscription_key="k", endpoint="http://localhost:9000/"))
    assert a.configured
    assert a.url == "http://localhost:9000/text/analytics/v2.1/sentiment"


@pytest.mark.parametrize(
    "side_effect",
    [requests.Timeout("slow"), requests.ConnectionError("down")],
)
def test_transport_error_degrades(analyzer: SentimentAnalyzer, side_effect: Exception) -> None:
    with patch.object(analyzer._session, "post", side_effect=side_effect):
        assert analyzer.analyze("text") == UNAVAILABLE


def test_http_error_degrades(analyzer: SentimentAnalyzer) -> None:
    resp = Mock()
    resp.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")
    with patch.object(analyzer._session, "post", return_value=resp):
        assert analyzer.analyze("text") == UNAVAILABLE


@pytest.mark.parametrize(
    "data",
    [
        {"documents": [], "errors": [{"id": "0", "message": "Invalid language"}]},
        {"unexpected": True},
        {"documents": [{"id": "0"}]},
        {"documents": [{"id": "0", "score": None}]},
        [],
        {"documents": [], "errors": ["boom"]},
        {"documents": ["x"]},
        {"documents": None},
        "text",
    ],
)
def test_bad_response_degrades(analyzer: SentimentAnalyzer, data: object) -> None:
    with patch.object(analyzer._session, "post", return_value=_ok(data)):
        assert analyzer.analyze("text") == UNAVAILABLE


def test_invalid_json_degrades(analyzer: SentimentAnalyzer) -> None:
    resp = _ok({})
    resp.json.side_effect = ValueError("not json")
    with patch.object(analyzer._session, "post", return_value=resp):
        assert analyzer.analyze("text") == UNAVAILABLE


def test_split_text() -> None:
    assert split_text("abcdefg", 3) == ["abc", "def", "g"]
    assert split_text("", 3) == [""]
