"""Extracts field values from markup using adapter field rules.

Nothing in here raises for page-derived faults. A bad selector, regex or URL
degrades to the next most useful value so one broken rule cannot poison the
other fields of an item.
"""

import logging
import re
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from sitespec.models import URL_FIELDS, AdapterSpec, FieldEntry, as_field_rule
from sitespec.utils.patterns import guarded_search

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r'<[^>]*>')


def select_first(scope: Tag, selector: str) -> Tag | None:
    """Return the first descendant matching a selector, or None on no match or bad syntax."""
    try:
        return scope.select_one(selector)
    except Exception as e:
        logger.debug('Selector %r failed: %s', selector, e)
        return None


def select_all(scope: Tag, selector: str) -> list[Tag]:
    """Return every node matching a selector, or an empty list on bad syntax."""
    try:
        return list(scope.select(selector))
    except Exception as e:
        logger.debug('Selector %r failed: %s', selector, e)
        return []


def _read_raw(node: Tag, attr: str | None, source: str) -> str | None:
    if attr:
        value: Any = node.get(attr)
        if isinstance(value, list):
            return ' '.join(value)
        return value
    if source == 'html':
        return node.decode_contents()
    return node.get_text()


def resolve_url(value: str, base_url: str) -> str:
    """Resolve a possibly relative URL, keeping the value unchanged if it cannot be resolved."""
    try:
        return urljoin(base_url, value)
    except ValueError:
        return value


def extract_field(scope: Tag, entry: FieldEntry, field_name: str, base_url: str) -> str | None:
    """Pull one value out of a scope node.

    Args:
        scope: Item node, or the document root for article fields
        entry: Bare selector string or FieldRule
        field_name: Logical field name; 'href' and 'image' resolve to absolute URLs by default
        base_url: Page URL used for resolution

    Returns:
        Trimmed, filtered value, or None if nothing usable was found.

    """
    rule = as_field_rule(entry)
    if rule is None:
        return None

    node = select_first(scope, rule.selector) if rule.selector else scope
    if node is None:
        return None

    raw = _read_raw(node, rule.attr, rule.source)
    if not raw:
        return None

    value = str(raw).strip()

    if rule.regex:
        match = guarded_search(rule.regex, value)
        if match:
            group = match.group(1) if match.re.groups else None
            value = group or match.group(0)

    absolute = rule.absolute if rule.absolute is not None else field_name in URL_FIELDS
    if absolute:
        value = resolve_url(value, base_url)

    return value or None


def extract_items(
    soup: BeautifulSoup, spec: AdapterSpec, base_url: str, limit: int | None = None
) -> list[dict[str, str | None]]:
    """Extract every field of every item node.

    Args:
        soup: Parsed document
        spec: Adapter spec with an item selector
        base_url: Page URL used for resolution
        limit: Optional cap on the number of items

    Returns:
        One dict per item node in document order, values None where a field is missing.

    """
    if not spec.item_selector:
        return []

    nodes = select_all(soup, spec.item_selector)
    if limit is not None:
        # Negative limits drop items from the end
        nodes = nodes[:limit]

    field_rules = spec.fields or {}
    return [{name: extract_field(node, rule, name, base_url) for name, rule in field_rules.items()} for node in nodes]


def strip_tags(markup: str) -> str:
    """Reduce markup to plain text by dropping tags."""
    return _TAG_PATTERN.sub('', markup).strip()


def extract_article(soup: BeautifulSoup, spec: AdapterSpec, base_url: str) -> dict[str, str]:
    """Extract the article body and byline from the document root.

    Returns:
        Dict with 'content' (plain text) and 'byline', empty strings when missing.

    """
    content = extract_field(soup, spec.content, 'content', base_url) or ''
    byline = extract_field(soup, spec.byline, 'byline', base_url) or ''
    return {'content': strip_tags(content), 'byline': strip_tags(byline)}
