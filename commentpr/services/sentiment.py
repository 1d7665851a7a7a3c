"""Sentiment score for comment text via Azure Text Analytics.

Optional: without a subscription key and region no request is made. Any
failure degrades to a sentinel score and never blocks publication.
"""

import logging
from typing import Any, Dict, List

import requests

from commentpr.config import SentimentConfig

NOT_CONFIGURED = "Not configured"
UNAVAILABLE = "Unavailable"

ENDPOINT_TEMPLATE = "https://{region}.api.cognitive.microsoft.com"
SENTIMENT_PATH = "/text/analytics/v2.1/sentiment"

LOG = logging.getLogger("commentpr.services.sentiment")


def split_text(text: str, chunk_size: int) -> List[str]:
    """Successive chunks of at most chunk_size characters."""
    if not text:
        return [""]
    return [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)]


class SentimentAnalyzer:
    """Scores text with one batched sentiment call.

    Long text is split into documents of at most ``chunk_size`` characters;
    the score of the first document is used for the whole comment.
    """

    def __init__(self, config: SentimentConfig, subscription_key: str | None = None) -> None:
        self._config = config
        key = subscription_key or config.subscription_key
        # Unsubstituted ${VAR} from YAML counts as not configured
        self._key = None if not key or key.startswith("${") else key
        self._session = requests.Session()
        if self._key:
            self._session.headers["Ocp-Apim-Subscription-Key"] = self._key

    @property
    def configured(self) -> bool:
        return bool(self._key and (self._config.region or self._config.endpoint))

    @property
    def url(self) -> str:
        base = self._config.endpoint or ENDPOINT_TEMPLATE.format(region=self._config.region)
        return f"{base.rstrip('/')}{SENTIMENT_PATH}"

    def _documents(self, text: str) -> List[Dict[str, str]]:
        return [
            {"language": self._config.language, "id": str(i), "text": chunk}
            for i, chunk in enumerate(split_text(text, self._config.chunk_size))
        ]

    def analyze(self, text: str) -> str:
        """Return the score formatted as 0.00, or a sentinel."""
        if not self.configured:
            return NOT_CONFIGURED
        documents = self._documents(text)
        try:
            resp = self._session.post(
                self.url,
                json={"documents": documents},
                timeout=self._config.timeout,
            )
            resp.raise_for_status()
            return self._first_score(resp.json())
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            LOG.warning("Sentiment analysis failed (%s documents): %s", len(documents), e)
            return UNAVAILABLE

    @staticmethod
    def _first_score(data: Any) -> str:
        if not isinstance(data, dict):
            raise ValueError(f"unexpected response body: {type(data).__name__}")
        for error in data.get("errors") or []:
            LOG.debug("Sentiment document error: %s", error)
        for doc in data.get("documents") or []:
            if isinstance(doc, dict) and str(doc.get("id")) == "0":
                return f"{float(doc['score']):.2f}"
        raise KeyError("no score for document 0")
