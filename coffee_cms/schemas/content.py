"""Content entry schemas."""

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from datetime import datetime
from typing import Any, Dict, List, Optional


class ContentEntryCreate(BaseModel):
    """Schema for creating a content entry."""
    data: Dict[str, Any]
    publish: bool = False  # Set publishedAt on creation

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "data": {
                        "title": "Dialing In Espresso at Home",
                        "slug": "dialing-in-espresso",
                        "content": "# Dialing In\n\nStart with an 18g dose...",
                        "meta_title": "How to Dial In Espresso",
                        "meta_description": "Grind size, dose, and yield explained for home baristas.",
                    },
                    "publish": True,
                }
            ]
        }
    }

    @field_validator('data')
    @classmethod
    def validate_field_names(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if any(not name or not name.strip() for name in v):
            raise ValueError("Field names cannot be empty")
        return v


class ContentEntryUpdate(BaseModel):
    """Schema for updating a content entry. Only the fields present are written."""
    data: Dict[str, Any]

    @field_validator('data')
    @classmethod
    def validate_field_names(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if any(not name or not name.strip() for name in v):
            raise ValueError("Field names cannot be empty")
        return v


class ContentEntryResponse(BaseModel):
    """Schema for content entry response."""
    id: int
    document_id: str
    content_type: str
    data: Dict[str, Any]
    published_at: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MetaOptimizationItem(BaseModel):
    """One entry whose meta description exceeds the length limit."""
    id: int
    document_id: str
    title: Optional[str] = None
    original: str
    original_length: int
    optimized: str
    optimized_length: int
    saved: int


class MetaOptimizationError(BaseModel):
    """An entry the bulk optimizer failed to update."""
    id: int
    error: str


class MetaOptimizationReport(BaseModel):
    """Result of a bulk meta-description optimization run."""
    content_type: str
    checked: int
    applied: bool
    updated: int = 0
    items: List[MetaOptimizationItem] = Field(default_factory=list)
    errors: List[MetaOptimizationError] = Field(default_factory=list)

    @computed_field
    @property
    def total_saved(self) -> int:
        return sum(item.saved for item in self.items)
