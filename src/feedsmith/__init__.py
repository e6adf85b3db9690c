"""FeedSmith - grid editing, history and flash fill for product feeds."""

__version__ = "0.1.0"
