"""Field extraction from markup."""

from sitespec.core.extraction.extractor import (
    extract_article,
    extract_field,
    extract_items,
    resolve_url,
    select_all,
    select_first,
    strip_tags,
)

__all__ = [
    'extract_article',
    'extract_field',
    'extract_items',
    'resolve_url',
    'select_all',
    'select_first',
    'strip_tags',
]
