"""Database infrastructure helpers (optional engine handle)."""

from .session import build_database_url, connect, dispose

__all__ = ["build_database_url", "connect", "dispose"]
