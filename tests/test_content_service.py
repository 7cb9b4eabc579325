"""Unit tests for ContentService, the write pipeline owning entry lifecycle.

Tests the service layer directly against the test database, bypassing the
HTTP stack. Covers hooks on create/update, publish-timestamp behavior,
publish/unpublish, and the bulk meta-description optimizer.
"""

import pytest
import sqlalchemy.exc
from sqlalchemy import event

from coffee_cms.database import SessionLocal, engine
from coffee_cms.exceptions import ContentNotFoundError, UnknownContentTypeError, ValidationError
from coffee_cms.models import ContentEntry
from coffee_cms.repositories import ContentRepository
from coffee_cms.services import ContentService
from coffee_cms.services.content_utils import shorten_meta_description
from tests.conftest import LONG_META_DESCRIPTION, make_entry

PUBLISHED = "2024-01-01T00:00:00.000Z"


class TestCreate:

    def test_create_draft(self, db):
        entry = ContentService(db).create_entry("article", make_entry())
        assert entry.id is not None
        assert len(entry.document_id) == 32
        assert entry.content_type == "article"
        assert entry.data["title"] == "Dialing In Espresso"
        assert entry.published_at is None

    def test_create_shortens_long_description(self, db):
        entry = ContentService(db).create_entry(
            "recipe", make_entry(meta_description=LONG_META_DESCRIPTION)
        )
        assert entry.data["meta_description"] == shorten_meta_description(LONG_META_DESCRIPTION)
        assert len(entry.data["meta_description"]) <= 160

    def test_create_published(self, db):
        entry = ContentService(db).create_entry("guide", make_entry(), publish=True)
        assert entry.published_at is not None
        assert entry.published_at.endswith("Z")

    def test_create_keeps_explicit_timestamp(self, db):
        entry = ContentService(db).create_entry("article", make_entry(publishedAt=PUBLISHED), publish=True)
        assert entry.published_at == PUBLISHED
        assert "publishedAt" not in entry.data

    def test_unknown_content_type(self, db):
        with pytest.raises(UnknownContentTypeError):
            ContentService(db).create_entry("author", make_entry())


class TestUpdate:

    def test_metadata_only_update_preserves_published_at(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("article", make_entry(publishedAt=PUBLISHED))

        updated = svc.update_entry("article", entry.id, {
            "meta_title": "Espresso Dial-In Guide",
            "meta_description": "Dose, grind, and yield in three steps.",
        })
        assert updated.published_at == PUBLISHED
        assert updated.data["meta_title"] == "Espresso Dial-In Guide"
        assert updated.data["content"] == "# Dialing In\n\nStart with an 18g dose."

    def test_full_content_update_republishes(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("article", make_entry(publishedAt=PUBLISHED))

        updated = svc.update_entry("article", entry.id, {
            "description": "Rewritten body",
            "meta_description": "Updated description.",
        })
        assert updated.published_at is not None
        assert updated.published_at != PUBLISHED

    def test_draft_stays_draft_on_update(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("product", make_entry())
        updated = svc.update_entry("product", entry.id, {"content": "New"})
        assert updated.published_at is None

    def test_update_shortens_long_description_and_preserves_timestamp(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("category", make_entry(publishedAt=PUBLISHED))
        updated = svc.update_entry("category", entry.id, {"meta_description": LONG_META_DESCRIPTION})
        assert len(updated.data["meta_description"]) <= 160
        assert updated.published_at == PUBLISHED

    def test_update_by_document_id(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("article", make_entry(publishedAt=PUBLISHED))
        updated = svc.update_entry("article", entry.document_id, {"meta_title": "By document id"})
        assert updated.id == entry.id
        assert updated.published_at == PUBLISHED

    def test_update_missing_entry_raises(self, db):
        with pytest.raises(ContentNotFoundError):
            ContentService(db).update_entry("article", 12345, {"meta_title": "x"})

    def test_update_scoped_to_content_type(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("article", make_entry())
        with pytest.raises(ContentNotFoundError):
            svc.update_entry("recipe", entry.id, {"meta_title": "x"})

    def test_storage_read_failure_does_not_block_write(self, db, monkeypatch):
        svc = ContentService(db)
        entry = svc.create_entry("article", make_entry(publishedAt=PUBLISHED))

        def _fail(*args, **kwargs):
            raise ConnectionError("database went away")

        monkeypatch.setattr(ContentRepository, "find_one", _fail)
        updated = svc.update_entry("article", entry.id, {"meta_title": "Saved anyway"})
        assert updated.data["meta_title"] == "Saved anyway"

    def test_failed_read_statement_does_not_abort_write(self, db):
        """A SELECT that fails in the database (e.g. a statement timeout) only
        rolls back its savepoint; the update in the same transaction commits."""
        svc = ContentService(db)
        entry = svc.create_entry("article", make_entry(publishedAt=PUBLISHED))
        failed = []

        def _timeout_reads_in_savepoint(conn, cursor, statement, parameters, context, executemany):
            if conn.in_nested_transaction() and statement.lstrip().upper().startswith("SELECT"):
                failed.append(statement)
                raise sqlalchemy.exc.OperationalError(
                    statement, parameters, Exception("canceling statement due to statement timeout")
                )

        event.listen(engine, "before_cursor_execute", _timeout_reads_in_savepoint)
        try:
            svc.update_entry("article", entry.id, {"meta_title": "Saved anyway"})
        finally:
            event.remove(engine, "before_cursor_execute", _timeout_reads_in_savepoint)

        assert failed
        check = SessionLocal()
        try:
            stored = check.get(ContentEntry, entry.id)
            assert stored.data["meta_title"] == "Saved anyway"
        finally:
            check.close()


class TestPublishing:

    def test_publish_sets_timestamp_once(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("recipe", make_entry())
        first = svc.publish_entry("recipe", entry.id).published_at
        assert first is not None
        assert svc.publish_entry("recipe", entry.id).published_at == first

    def test_unpublish_clears_timestamp(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("recipe", make_entry(), publish=True)
        assert svc.unpublish_entry("recipe", entry.id).published_at is None

    def test_list_by_status(self, db):
        svc = ContentService(db)
        svc.create_entry("article", make_entry(title="Draft"))
        svc.create_entry("article", make_entry(title="Live"), publish=True)
        svc.create_entry("recipe", make_entry(title="Other type"), publish=True)

        assert [e.data["title"] for e in svc.list_entries("article", "published")] == ["Live"]
        assert [e.data["title"] for e in svc.list_entries("article", "draft")] == ["Draft"]
        assert len(svc.list_entries("article")) == 2

    def test_list_invalid_status(self, db):
        with pytest.raises(ValidationError):
            ContentService(db).list_entries("article", "archived")

    def test_delete_is_idempotent(self, db):
        svc = ContentService(db)
        entry = svc.create_entry("guide", make_entry())
        assert svc.delete_entry("guide", entry.id) is True
        assert svc.delete_entry("guide", entry.id) is False


def _seed_long_description(db, content_type="article", **overrides):
    """Insert an entry bypassing the hooks, as legacy data would exist."""
    fields = make_entry(meta_description=LONG_META_DESCRIPTION, publishedAt=PUBLISHED, **overrides)
    entry = ContentRepository(db).create(content_type, fields)
    db.commit()
    return entry


class TestOptimizeMetaDescriptions:

    def test_dry_run_reports_without_writing(self, db):
        entry = _seed_long_description(db)
        ContentService(db).create_entry("article", make_entry(title="Fine"), publish=True)

        report = ContentService(db).optimize_meta_descriptions("article")
        assert report.checked == 2
        assert report.applied is False
        assert report.updated == 0
        assert len(report.items) == 1

        item = report.items[0]
        assert item.id == entry.id
        assert item.title == "Dialing In Espresso"
        assert item.original_length == len(LONG_META_DESCRIPTION)
        assert item.optimized == shorten_meta_description(LONG_META_DESCRIPTION)
        assert item.saved == item.original_length - item.optimized_length
        assert report.total_saved == item.saved

        db.refresh(entry)
        assert entry.data["meta_description"] == LONG_META_DESCRIPTION

    def test_apply_writes_and_preserves_published_at(self, db):
        entry = _seed_long_description(db)

        report = ContentService(db).optimize_meta_descriptions("article", apply=True)
        assert report.updated == 1
        assert report.errors == []

        db.refresh(entry)
        assert entry.data["meta_description"] == shorten_meta_description(LONG_META_DESCRIPTION)
        assert entry.published_at == PUBLISHED

    def test_drafts_are_skipped(self, db):
        fields = make_entry(meta_description=LONG_META_DESCRIPTION)
        ContentRepository(db).create("article", fields)
        db.commit()

        report = ContentService(db).optimize_meta_descriptions("article")
        assert report.checked == 0
        assert report.items == []

    def test_failures_are_reported_not_raised(self, db, monkeypatch):
        entry = _seed_long_description(db)

        def _fail(*args, **kwargs):
            raise RuntimeError("write rejected")

        monkeypatch.setattr(ContentRepository, "update", _fail)
        report = ContentService(db).optimize_meta_descriptions("article", apply=True)
        assert report.updated == 0
        assert len(report.errors) == 1
        assert report.errors[0].id == entry.id
        assert "write rejected" in report.errors[0].error
