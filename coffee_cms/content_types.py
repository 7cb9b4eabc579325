"""Content-type registry for the pre-write transform stage.

Each configured content type declares which field holds the search-snippet
description and which fields count as SEO metadata. The registry is a static
table; the write pipeline looks types up here instead of subscribing hooks
per type at startup.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .exceptions import UnknownContentTypeError

PUBLISHED_AT_FIELD = "publishedAt"

META_TITLE_FIELD = "meta_title"
META_DESCRIPTION_FIELD = "meta_description"


class ContentType(str, Enum):
    """Content types served by the CMS."""
    ARTICLE = "article"
    CATEGORY = "category"
    PRODUCT = "product"
    RECIPE = "recipe"
    GUIDE = "guide"


@dataclass(frozen=True)
class ContentTypeConfig:
    """Write-pipeline settings for one content type."""
    content_type: ContentType
    long_text_field: str = META_DESCRIPTION_FIELD
    metadata_fields: frozenset[str] = frozenset({META_TITLE_FIELD, META_DESCRIPTION_FIELD})

    def is_metadata_field(self, field_name: str) -> bool:
        return field_name in self.metadata_fields


_CONFIGS = (
    ContentTypeConfig(ContentType.ARTICLE),
    ContentTypeConfig(ContentType.CATEGORY),
    ContentTypeConfig(ContentType.PRODUCT),
    ContentTypeConfig(ContentType.RECIPE),
    ContentTypeConfig(ContentType.GUIDE),
)

CONTENT_TYPE_REGISTRY: Mapping[str, ContentTypeConfig] = MappingProxyType({
    config.content_type.value: config for config in _CONFIGS
})


def get_content_type_config(content_type: str) -> ContentTypeConfig:
    """Resolve a content-type name. Raises UnknownContentTypeError if not configured."""
    key = content_type.value if isinstance(content_type, ContentType) else content_type
    config = CONTENT_TYPE_REGISTRY.get(key)
    if config is None:
        raise UnknownContentTypeError(str(content_type))
    return config
