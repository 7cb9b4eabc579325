"""Pydantic schemas for API validation."""

from .content import (
    ContentEntryCreate,
    ContentEntryUpdate,
    ContentEntryResponse,
    MetaOptimizationItem,
    MetaOptimizationError,
    MetaOptimizationReport,
)

__all__ = [
    "ContentEntryCreate",
    "ContentEntryUpdate",
    "ContentEntryResponse",
    "MetaOptimizationItem",
    "MetaOptimizationError",
    "MetaOptimizationReport",
]
