"""Content API endpoints.

Endpoints are thin: ContentService runs the write pipeline (pre-write hooks,
persistence, commit) for every create and update.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from ..database import get_db
from ..schemas.content import ContentEntryCreate, ContentEntryResponse, ContentEntryUpdate
from ..services import ContentService

router = APIRouter(prefix="/api/content/{content_type}", tags=["content"])


@router.post("", response_model=ContentEntryResponse, status_code=201)
def create_entry(
    content_type: str,
    payload: ContentEntryCreate,
    db: Session = Depends(get_db),
):
    """Create an entry. Over-long meta descriptions are shortened before saving."""
    return ContentService(db).create_entry(content_type, payload.data, publish=payload.publish)


@router.get("", response_model=List[ContentEntryResponse])
def list_entries(
    content_type: str,
    status: Optional[str] = Query(None, description="'published', 'draft', or omit for both"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """List entries of a content type."""
    return ContentService(db).list_entries(content_type, status, skip, limit)


@router.get("/{record_id}", response_model=ContentEntryResponse)
def get_entry(content_type: str, record_id: str, db: Session = Depends(get_db)):
    """Get an entry by numeric id or document id."""
    return ContentService(db).get_entry(content_type, record_id)


@router.put("/{record_id}", response_model=ContentEntryResponse)
def update_entry(
    content_type: str,
    record_id: str,
    payload: ContentEntryUpdate,
    db: Session = Depends(get_db),
):
    """Update the given fields of an entry.

    Updates that only touch SEO metadata fields keep the entry's original
    publish timestamp.
    """
    return ContentService(db).update_entry(content_type, record_id, payload.data)


@router.delete("/{record_id}", status_code=204)
def delete_entry(content_type: str, record_id: str, db: Session = Depends(get_db)):
    """Delete an entry. Idempotent."""
    ContentService(db).delete_entry(content_type, record_id)
    return Response(status_code=204)


@router.post("/{record_id}/publish", response_model=ContentEntryResponse)
def publish_entry(content_type: str, record_id: str, db: Session = Depends(get_db)):
    """Publish an entry. No-op if already published."""
    return ContentService(db).publish_entry(content_type, record_id)


@router.post("/{record_id}/unpublish", response_model=ContentEntryResponse)
def unpublish_entry(content_type: str, record_id: str, db: Session = Depends(get_db)):
    """Move an entry back to draft."""
    return ContentService(db).unpublish_entry(content_type, record_id)
