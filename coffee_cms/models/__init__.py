"""Database models."""

from .content import ContentEntry

__all__ = ["ContentEntry"]
