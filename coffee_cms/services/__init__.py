"""Business logic services."""

from .content_service import ContentService
from .content_utils import shorten_meta_description
from .lifecycle_service import WriteAction, WriteOperation, apply_write_hooks

__all__ = [
    "ContentService",
    "shorten_meta_description",
    "WriteAction",
    "WriteOperation",
    "apply_write_hooks",
]
