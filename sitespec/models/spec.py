"""Pydantic models for declarative site adapter specs."""

from datetime import datetime
from typing import Any, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sitespec.utils.patterns import guarded_search

Template = Literal['list', 'news', 'shopping', 'article']

ITEM_TEMPLATES: tuple[str, ...] = ('list', 'news', 'shopping')
URL_FIELDS: frozenset[str] = frozenset({'href', 'image'})
DEFAULT_MAX_ITEMS = 60


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to the camelCase wire format, dropping unset optional keys."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class FieldRule(CamelModel):
    """How to pull one named value out of a scope node.

    Attributes:
        selector: CSS selector for the first matching descendant, or None for the scope itself
        attr: Attribute to read instead of text
        source: 'text' (default) or 'html' for inner markup
        regex: Pattern applied after extraction; group 1 wins over the full match
        absolute: Force or forbid URL resolution; defaults to True for href/image fields

    """

    selector: str | None = None
    attr: str | None = None
    source: str = 'text'
    regex: str | None = None
    absolute: bool | None = None

    @field_validator('source', mode='before')
    @classmethod
    def _default_source(cls, value: Any) -> Any:
        # Anything that is not 'html' reads text, including null
        return value if value == 'html' else 'text'


# A field entry is either a bare selector string or a full rule object.
FieldEntry = str | FieldRule | None


def as_field_rule(entry: FieldEntry) -> FieldRule | None:
    """Normalize a bare selector string into a FieldRule.

    Args:
        entry: Bare selector, FieldRule, or None

    Returns:
        FieldRule, or None when the entry is empty.

    """
    if entry is None:
        return None
    if isinstance(entry, str):
        return FieldRule(selector=entry)
    return entry


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class MatchRule(CamelModel):
    """URL matching rule. Every non-empty list must have at least one matching member.

    Attributes:
        host_contains: Substrings of the lowercased hostname
        path_prefix: Prefixes of the URL path
        url_regex: Patterns searched in the full URL

    """

    host_contains: list[str] = Field(default_factory=list)
    path_prefix: list[str] = Field(default_factory=list)
    url_regex: list[str] = Field(default_factory=list)

    @field_validator('host_contains', 'path_prefix', 'url_regex', mode='before')
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        return _as_list(value)

    def matches(self, url: str) -> bool:
        """Check whether a URL satisfies this rule.

        Args:
            url: Absolute URL

        Returns:
            True if every constrained list has a matching member.

        """
        parsed = urlparse(url)
        host = (parsed.hostname or '').lower()
        path = parsed.path or '/'

        if self.host_contains and not any(h.lower() in host for h in self.host_contains):
            return False
        if self.path_prefix and not any(path.startswith(prefix) for prefix in self.path_prefix):
            return False
        if self.url_regex and not any(guarded_search(pattern, url) for pattern in self.url_regex):
            return False
        return True


class AdapterSpec(CamelModel):
    """Declarative contract describing how to scrape one site.

    Unknown keys emitted by the model are kept so they survive a store round trip.

    Attributes:
        id: Stable site/template slug, used as the store key
        template: Extraction shape ('list', 'news', 'shopping', 'article')
        match: Optional URL matching rule; None matches every URL
        item_selector: Selector for repeated item nodes
        fields: Field name to rule mapping, evaluated inside each item
        content: Article body rule, evaluated from the document root
        byline: Article byline rule
        max_items: Cap on extracted items
        search_box: Presentation hint
        mode_label: Presentation hint
        updated_at: Stamped on every store write

    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='allow')

    id: str | None = None
    template: str
    match: MatchRule | None = None
    item_selector: str | None = None
    fields: dict[str, FieldEntry] | None = None
    content: FieldEntry = None
    byline: FieldEntry = None
    max_items: int | None = None
    search_box: bool | None = None
    mode_label: str | None = None
    updated_at: datetime | None = None

    @field_validator('id', 'template', mode='before')
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator('mode_label', mode='before')
    @classmethod
    def _coerce_label(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (dict, list)):
            return None
        return str(value)

    @field_validator('search_box', mode='before')
    @classmethod
    def _coerce_flag(cls, value: Any) -> Any:
        # Presentation hints never reject a spec
        return value if isinstance(value, bool) else None

    @property
    def is_item_template(self) -> bool:
        """True for list-shaped templates that need an item selector."""
        return self.template in ITEM_TEMPLATES

    def matches(self, url: str) -> bool:
        """Check whether this spec applies to a URL."""
        return self.match is None or self.match.matches(url)
