"""Content repository for database operations.

Owns all content-entry queries. Every query is scoped to one content type,
and records can be addressed by numeric id or by opaque document id.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Union

import sqlalchemy.exc
from sqlalchemy.orm import Query, Session

from ..content_types import PUBLISHED_AT_FIELD
from ..exceptions import ContentNotFoundError, DatabaseError
from ..models import ContentEntry

RecordId = Union[int, str]

# Upper bound of the BIGINT-compatible integer id column.
MAX_RECORD_ID = 2**63 - 1


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with millisecond precision: 2024-01-01T00:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ContentRepository:
    """Repository for content-entry CRUD operations.

    Publishing follows the headless-CMS convention: writing to a published
    entry re-publishes it, so ``published_at`` moves to the write time unless
    the field map carries an explicit ``publishedAt``.
    """

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, content_type: str) -> Query:
        return self.db.query(ContentEntry).filter(ContentEntry.content_type == content_type)

    @staticmethod
    def _numeric_id(record_id: RecordId) -> Optional[int]:
        """The integer id addressed by ``record_id``, or None for a document id."""
        if isinstance(record_id, int):
            return record_id
        if record_id.isascii() and record_id.isdecimal():
            return int(record_id)
        return None

    def get_by_id_optional(self, content_type: str, record_id: RecordId) -> Optional[ContentEntry]:
        """Get entry by id or document id, or None if not found."""
        numeric_id = self._numeric_id(record_id)
        if numeric_id is None:
            criterion = ContentEntry.document_id == str(record_id)
        elif 0 <= numeric_id <= MAX_RECORD_ID:
            criterion = ContentEntry.id == numeric_id
        else:
            return None
        return self._base_query(content_type).filter(criterion).first()

    def get_by_id(self, content_type: str, record_id: RecordId) -> ContentEntry:
        """Get entry by id or document id. Raises ContentNotFoundError if missing."""
        entry = self.get_by_id_optional(content_type, record_id)
        if entry is None:
            raise ContentNotFoundError(content_type, str(record_id))
        return entry

    def find_one(self, content_type: str, record_id: RecordId) -> Optional[Mapping[str, Any]]:
        """Field-map view of a stored entry, or None if not found.

        The read runs in a savepoint, so a failed or timed-out statement
        leaves the surrounding transaction usable for the write that follows.

        Raises:
            DatabaseError: If the read itself fails.
        """
        try:
            with self.db.begin_nested():
                entry = self.get_by_id_optional(content_type, record_id)
        except sqlalchemy.exc.SQLAlchemyError as e:
            raise DatabaseError(f"Failed to read {content_type} entry {record_id}", e) from e
        return entry.to_fields() if entry is not None else None

    def find_many(
        self,
        content_type: str,
        status: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = 100,
    ) -> List[ContentEntry]:
        """List entries of a type. ``status`` is "published", "draft", or None for both."""
        query = self._base_query(content_type)
        if status == "published":
            query = query.filter(ContentEntry.published_at.isnot(None))
        elif status == "draft":
            query = query.filter(ContentEntry.published_at.is_(None))
        return query.order_by(ContentEntry.id).offset(skip).limit(limit).all()

    def count(self, content_type: Optional[str] = None) -> int:
        query = self.db.query(ContentEntry)
        if content_type:
            query = query.filter(ContentEntry.content_type == content_type)
        return query.count()

    def create(self, content_type: str, fields: Mapping[str, Any]) -> ContentEntry:
        """Create a new entry from a field map."""
        data = dict(fields)
        published_at = data.pop(PUBLISHED_AT_FIELD, None)

        entry = ContentEntry(
            document_id=uuid.uuid4().hex,
            content_type=content_type,
            data=data,
            published_at=published_at or None,
        )
        self.db.add(entry)
        self.db.flush()
        self.db.refresh(entry)
        return entry

    def update(self, content_type: str, record_id: RecordId, fields: Mapping[str, Any]) -> ContentEntry:
        """Merge a field map into an existing entry."""
        entry = self.get_by_id(content_type, record_id)
        data = dict(fields)
        explicit_timestamp = PUBLISHED_AT_FIELD in data
        published_at = data.pop(PUBLISHED_AT_FIELD, None)

        # Reassign rather than mutate so the JSON column is flagged dirty.
        entry.data = {**(entry.data or {}), **data}

        if explicit_timestamp:
            entry.published_at = published_at or None
        elif entry.published_at:
            entry.published_at = utc_timestamp()

        self.db.flush()
        self.db.refresh(entry)
        return entry

    def delete(self, content_type: str, record_id: RecordId) -> bool:
        """Delete an entry. Idempotent: returns False if it did not exist."""
        entry = self.get_by_id_optional(content_type, record_id)
        if entry is None:
            return False
        self.db.delete(entry)
        self.db.flush()
        return True
