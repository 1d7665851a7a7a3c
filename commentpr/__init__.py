"""Publish blog comments to a GitHub repository as pull requests."""

__version__ = "0.1.0"
