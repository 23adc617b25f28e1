"""Networked Gomoku: an asyncio game server, console client and wire protocol."""

__version__ = "0.1.0"
__all__ = ["__version__"]