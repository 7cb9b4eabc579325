"""Pre-write transform stage for content entries.

Every create/update on a configured content type passes through
``apply_write_hooks`` before it reaches storage. Two rules run here:

- Meta-description shortening: an over-long description field is rewritten
  by ``shorten_meta_description`` on both creates and updates.
- Publish-timestamp preservation: an update touching only SEO metadata
  fields re-applies the stored ``publishedAt`` so the edit does not look
  like a new publication.

Both rules are best-effort. Failures are logged and the write proceeds with
whatever fields it had; nothing raised here may block a content write.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, MutableMapping, Optional, Protocol, Union

from ..content_types import CONTENT_TYPE_REGISTRY, PUBLISHED_AT_FIELD, ContentTypeConfig
from .content_utils import META_DESCRIPTION_MAX_LENGTH, shorten_meta_description

logger = logging.getLogger(__name__)


class WriteAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class RecordFetcher(Protocol):
    """Read access to stored entries, used to look up prior publish timestamps."""

    def find_one(self, content_type: str, record_id: Union[int, str]) -> Optional[Mapping[str, Any]]:
        ...


@dataclass
class WriteOperation:
    """One pending write: the fields being changed and the record they target."""
    action: WriteAction
    content_type: str
    data: MutableMapping[str, Any]
    record_id: Optional[Union[int, str]] = None


def is_metadata_only(config: ContentTypeConfig, data: Mapping[str, Any]) -> bool:
    """True if every field in the write belongs to the metadata allow-list."""
    return all(config.is_metadata_field(name) for name in data)


def optimize_long_text(
    config: ContentTypeConfig,
    data: MutableMapping[str, Any],
    limit: int = META_DESCRIPTION_MAX_LENGTH,
) -> bool:
    """Shorten the configured long-text field in place. Returns True if rewritten."""
    value = data.get(config.long_text_field)
    if not isinstance(value, str) or len(value) <= limit:
        return False

    data[config.long_text_field] = shorten_meta_description(value, limit)
    logger.info(
        "Auto-optimized %s for %s: %d chars",
        config.long_text_field,
        config.content_type.value,
        len(data[config.long_text_field]),
        extra={
            "content_type": config.content_type.value,
            "original_length": len(value),
        },
    )
    return True


def preserve_published_at(
    config: ContentTypeConfig,
    operation: WriteOperation,
    fetcher: Optional[RecordFetcher],
) -> bool:
    """Re-apply the stored publish timestamp on a metadata-only update.

    Returns True if ``publishedAt`` was set on the outgoing field map.
    """
    if operation.action != WriteAction.UPDATE or not is_metadata_only(config, operation.data):
        return False

    if fetcher is None or operation.record_id is None:
        logger.warning(
            "Cannot preserve %s for %s: no record to read from",
            PUBLISHED_AT_FIELD, operation.content_type,
        )
        return False

    try:
        existing = fetcher.find_one(operation.content_type, operation.record_id)
    except Exception as e:
        logger.warning(
            "Skipping %s preservation for %s %s: %s",
            PUBLISHED_AT_FIELD, operation.content_type, operation.record_id, e,
            exc_info=True,
        )
        return False

    if existing is None:
        logger.debug(
            "Skipping %s preservation: %s %s not found",
            PUBLISHED_AT_FIELD, operation.content_type, operation.record_id,
        )
        return False

    published_at = existing.get(PUBLISHED_AT_FIELD)
    if not published_at:
        return False

    operation.data[PUBLISHED_AT_FIELD] = published_at
    logger.debug(
        "Preserved %s=%s on metadata-only update of %s %s",
        PUBLISHED_AT_FIELD, published_at, operation.content_type, operation.record_id,
    )
    return True


def apply_write_hooks(
    operation: WriteOperation,
    fetcher: Optional[RecordFetcher] = None,
    registry: Mapping[str, ContentTypeConfig] = CONTENT_TYPE_REGISTRY,
) -> MutableMapping[str, Any]:
    """Run the pre-write rules on an operation's field map.

    The map is mutated in place and also returned. Content types missing from
    the registry pass through untouched.

    Args:
        operation: The pending write.
        fetcher: Storage read access; required for publish-timestamp preservation.
        registry: Content-type configuration table.

    Returns:
        The (possibly rewritten) field map to hand to storage.
    """
    config = registry.get(operation.content_type)
    if config is None:
        return operation.data

    try:
        optimize_long_text(config, operation.data)
    except Exception:
        logger.exception(
            "Meta description optimization failed for %s; keeping original value",
            operation.content_type,
        )

    try:
        preserve_published_at(config, operation, fetcher)
    except Exception:
        logger.exception(
            "Publish timestamp preservation failed for %s %s",
            operation.content_type, operation.record_id,
        )

    return operation.data
