"""Content entry model."""

from sqlalchemy import Column, Index, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from ..database import Base
from ..content_types import PUBLISHED_AT_FIELD


class ContentEntry(Base):
    """One record of any configured content type."""

    __tablename__ = "content_entries"
    __table_args__ = (
        Index("ix_content_entries_content_type", "content_type"),
        Index("ix_content_entries_document_id", "document_id", unique=True),
        Index("ix_content_entries_updated_at", "updated_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Opaque identifier exposed to the front end: uuid4 hex.
    document_id = Column(String(32), nullable=False)

    # One of ContentType values: article, category, product, recipe, guide
    content_type = Column(String(50), nullable=False)

    # Every attribute except the publish timestamp:
    # {"title": ..., "slug": ..., "meta_title": ..., "meta_description": ...}
    data = Column(JSON, nullable=False, default=dict)

    # ISO-8601 string; NULL = draft (unpublished)
    published_at = Column(String(40), nullable=True, default=None)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_published(self) -> bool:
        return bool(self.published_at)

    def to_fields(self) -> dict:
        """Field-map view of the entry, as seen by the write pipeline."""
        fields = dict(self.data or {})
        fields[PUBLISHED_AT_FIELD] = self.published_at
        return fields
