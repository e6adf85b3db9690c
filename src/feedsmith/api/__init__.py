"""Web API for FeedSmith."""

from .app import create_app

__all__ = ["create_app"]
