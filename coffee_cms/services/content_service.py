"""Content service: the write pipeline for content entries.

Every create/update runs the same three steps: resolve the content type,
pass the field map through the pre-write hooks (lifecycle_service), then
persist and commit. Callers never touch the repository or the hooks directly.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..content_types import PUBLISHED_AT_FIELD, get_content_type_config
from ..exceptions import ValidationError
from ..models import ContentEntry
from ..repositories import ContentRepository
from ..repositories.content_repository import RecordId, utc_timestamp
from ..schemas.content import MetaOptimizationError, MetaOptimizationItem, MetaOptimizationReport
from .content_utils import META_DESCRIPTION_MAX_LENGTH, shorten_meta_description
from .lifecycle_service import WriteAction, WriteOperation, apply_write_hooks

logger = logging.getLogger(__name__)

VALID_STATUSES = ("published", "draft")


class ContentService:
    """Create, read, update, delete and publish entries of any configured type."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ContentRepository(db)

    def create_entry(self, content_type: str, data: Dict[str, Any], publish: bool = False) -> ContentEntry:
        """Create an entry after running the pre-write hooks."""
        config = get_content_type_config(content_type)
        fields = dict(data)
        if publish and not fields.get(PUBLISHED_AT_FIELD):
            fields[PUBLISHED_AT_FIELD] = utc_timestamp()

        operation = WriteOperation(WriteAction.CREATE, config.content_type.value, fields)
        fields = apply_write_hooks(operation, fetcher=self.repo)

        entry = self.repo.create(config.content_type.value, fields)
        self.db.commit()
        logger.info(
            "Created %s entry %s", config.content_type.value, entry.id,
            extra={"content_type": config.content_type.value, "entry_id": entry.id},
        )
        return entry

    def update_entry(self, content_type: str, record_id: RecordId, data: Dict[str, Any]) -> ContentEntry:
        """Update an entry after running the pre-write hooks.

        Raises ContentNotFoundError (404) if the entry does not exist.
        """
        config = get_content_type_config(content_type)
        self.repo.get_by_id(config.content_type.value, record_id)

        operation = WriteOperation(WriteAction.UPDATE, config.content_type.value, dict(data), record_id)
        fields = apply_write_hooks(operation, fetcher=self.repo)

        entry = self.repo.update(config.content_type.value, record_id, fields)
        self.db.commit()
        return entry

    def get_entry(self, content_type: str, record_id: RecordId) -> ContentEntry:
        """Get an entry. Raises ContentNotFoundError if missing."""
        config = get_content_type_config(content_type)
        return self.repo.get_by_id(config.content_type.value, record_id)

    def list_entries(
        self,
        content_type: str,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[ContentEntry]:
        """List entries of a type, optionally filtered by publication status."""
        config = get_content_type_config(content_type)
        if status is not None and status not in VALID_STATUSES:
            raise ValidationError(f"Invalid status '{status}'. Must be one of: {VALID_STATUSES}", field="status")
        return self.repo.find_many(config.content_type.value, status, skip, limit)

    def delete_entry(self, content_type: str, record_id: RecordId) -> bool:
        """Delete an entry. Idempotent."""
        config = get_content_type_config(content_type)
        result = self.repo.delete(config.content_type.value, record_id)
        self.db.commit()
        return result

    def publish_entry(self, content_type: str, record_id: RecordId) -> ContentEntry:
        """Publish an entry. Already-published entries keep their timestamp."""
        entry = self.get_entry(content_type, record_id)
        if entry.is_published:
            return entry
        return self.update_entry(content_type, record_id, {PUBLISHED_AT_FIELD: utc_timestamp()})

    def unpublish_entry(self, content_type: str, record_id: RecordId) -> ContentEntry:
        """Move an entry back to draft."""
        entry = self.get_entry(content_type, record_id)
        if not entry.is_published:
            return entry
        return self.update_entry(content_type, record_id, {PUBLISHED_AT_FIELD: None})

    def optimize_meta_descriptions(
        self,
        content_type: str,
        apply: bool = False,
        limit: int = META_DESCRIPTION_MAX_LENGTH,
    ) -> MetaOptimizationReport:
        """Find published entries whose long-text field is over the limit.

        Dry run by default: the report lists each candidate with its original
        and optimized text. With ``apply=True`` each optimization is written
        as a metadata-only update, so publish timestamps are kept. Per-entry
        failures are reported, not raised.
        """
        config = get_content_type_config(content_type)
        field = config.long_text_field
        entries = self.repo.find_many(config.content_type.value, status="published", limit=None)

        items: list[MetaOptimizationItem] = []
        for entry in entries:
            original = (entry.data or {}).get(field)
            if not isinstance(original, str) or len(original) <= limit:
                continue
            optimized = shorten_meta_description(original, limit)
            items.append(MetaOptimizationItem(
                id=entry.id,
                document_id=entry.document_id,
                title=(entry.data or {}).get("title") or (entry.data or {}).get("name"),
                original=original,
                original_length=len(original),
                optimized=optimized,
                optimized_length=len(optimized),
                saved=len(original) - len(optimized),
            ))

        report = MetaOptimizationReport(
            content_type=config.content_type.value,
            checked=len(entries),
            applied=apply,
            items=items,
        )
        logger.info(
            "Found %d %s entries with %s over %d chars",
            len(items), config.content_type.value, field, limit,
        )

        if not apply:
            return report

        for item in items:
            try:
                self.update_entry(config.content_type.value, item.id, {field: item.optimized})
                report.updated += 1
            except Exception as e:
                self.db.rollback()
                logger.warning("Failed to optimize %s %s: %s", config.content_type.value, item.id, e, exc_info=True)
                report.errors.append(MetaOptimizationError(id=item.id, error=str(e)))

        logger.info(
            "Optimized %d %s meta descriptions, %d chars saved",
            report.updated, config.content_type.value, report.total_saved,
        )
        return report
