"""Content service adapter."""

from .client import HttpContentDirectory, MockContentDirectory

__all__ = ["HttpContentDirectory", "MockContentDirectory"]
