"""Core configuration."""

from .config import DEFAULT_AUTHORITY_HOST, Settings

__all__ = ["DEFAULT_AUTHORITY_HOST", "Settings"]
