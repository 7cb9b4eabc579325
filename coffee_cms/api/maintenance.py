"""Maintenance endpoints for bulk content fixes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.content import MetaOptimizationReport
from ..services import ContentService

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.post("/meta-descriptions/{content_type}", response_model=MetaOptimizationReport)
def optimize_meta_descriptions(
    content_type: str,
    apply: bool = Query(False, description="Write the optimized descriptions (default: dry run)"),
    db: Session = Depends(get_db),
):
    """Report, and optionally fix, published entries with over-long meta descriptions."""
    return ContentService(db).optimize_meta_descriptions(content_type, apply=apply)
