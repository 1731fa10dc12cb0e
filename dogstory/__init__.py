"""Dog-walking game server parts: JSON map configuration, map API documents, options, ticker, random helpers and an asyncio HTTP server."""

__version__ = "0.1.0"