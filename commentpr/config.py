"""Configuration loading from YAML and environment.

Secrets (GitHub token, sentiment subscription key) are taken from
environment variables or from files (Docker secrets). Never put real
tokens in config files committed to the repo.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


def _is_placeholder(value: str | None) -> bool:
    return not value or value.startswith("${")


# Injected by load_config so properties can read env/file
_current_env: dict[str, str] = {}


class GitHubConfig(BaseSettings):
    """GitHub API settings and the repository comments are published to."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    repository: str = Field(default="owner/repo", description="owner/name or numeric repository id")
    branch: str | None = Field(default=None, description="Base branch for PRs; repo default when unset")
    timeout: float = Field(default=30, gt=0, description="Per-request timeout in seconds")


class CommentsConfig(BaseSettings):
    """Where and how comment records are written."""

    model_config = SettingsConfigDict(env_prefix="COMMENTS_", extra="ignore")

    folder: str = Field(default="_data/comments", description="Folder holding one subfolder per post")
    extension: str = Field(default="yml", description="Record file extension")
    fallback_email: str = Field(
        default="redacted@example.com",
        description="Committer email when the commenter gave none",
    )
    website_url: str | None = Field(
        default=None,
        description="Site allowed to post comments; host of comment-site must match",
    )
    require_email: bool = Field(default=True, description="Reject comments without an email")


class SentimentConfig(BaseSettings):
    """Azure Text Analytics settings (optional)."""

    model_config = SettingsConfigDict(env_prefix="SENTIMENT_", extra="ignore")

    subscription_key: str | None = Field(default=None, description="Ocp-Apim-Subscription-Key")
    region: str | None = Field(default=None, description="Azure region, e.g. westeurope")
    language: str = Field(default="en", description="Document language sent with each chunk")
    endpoint: str | None = Field(default=None, description="Override the region-derived endpoint")
    timeout: float = Field(default=10, gt=0, description="Per-request timeout in seconds")
    chunk_size: int = Field(default=5000, ge=1, description="Max characters per document")


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(env_prefix="SERVER_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, ge=0, le=65535, description="Bind port")
    comment_path: str = Field(default="/comment", description="Form POST path")
    warmup_path: str = Field(default="/warmup", description="Liveness path, no side effects")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    comments: CommentsConfig = Field(default_factory=CommentsConfig)
    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if not _is_placeholder(t):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    @property
    def sentiment_key_resolved(self) -> str | None:
        """Resolve sentiment subscription key from config, env or secret
        file."""
        k = self.sentiment.subscription_key
        if not _is_placeholder(k):
            return k
        return _read_secret("SENTIMENT_SUBSCRIPTION_KEY", "SENTIMENT_SUBSCRIPTION_KEY_FILE")

    @property
    def allowed_site(self) -> str | None:
        """Site allowed to post comments; None disables the origin check."""
        url = self.comments.website_url
        if _is_placeholder(url) or not url.strip():
            return None
        return url.strip()


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE, SENTIMENT_SUBSCRIPTION_KEY
    or SENTIMENT_SUBSCRIPTION_KEY_FILE.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    # Env overrides for nested values (e.g. GITHUB_REPOSITORY)
    github_raw = raw.get("github") or {}
    if _current_env.get("GITHUB_REPOSITORY"):
        github_raw = {**github_raw, "repository": _current_env.get("GITHUB_REPOSITORY")}

    return AppConfig(
        github=GitHubConfig(**github_raw),
        comments=CommentsConfig(**(raw.get("comments") or {})),
        sentiment=SentimentConfig(**(raw.get("sentiment") or {})),
        server=ServerConfig(**(raw.get("server") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
