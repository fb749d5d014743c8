"""The Lucky Triple game server."""

__version__ = "1.0.0"
