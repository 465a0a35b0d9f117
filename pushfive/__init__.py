"""PushFive: rules engine, alpha-beta AI and local service for a 5x5 push/surround game."""

__version__ = "1.0.0"
