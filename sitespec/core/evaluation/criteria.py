"""Default acceptance thresholds per template and caller override merging."""

from collections.abc import Mapping
from typing import Any

from sitespec.models import AcceptanceCriteria, CriteriaOverrides

BASE_REQUIRED_FIELDS: dict[str, float] = {'title': 0.7, 'href': 0.7}

TEMPLATE_REQUIRED_FIELDS: dict[str, dict[str, float]] = {
    'shopping': {'price': 0.3},
    'news': {'source': 0.2, 'time': 0.2},
}


def default_criteria(template: str | None) -> AcceptanceCriteria:
    """Return the default criteria for a template.

    Args:
        template: Template name; unknown templates get the base criteria

    Returns:
        Fresh AcceptanceCriteria instance.

    """
    required = {**BASE_REQUIRED_FIELDS, **TEMPLATE_REQUIRED_FIELDS.get(template or '', {})}
    return AcceptanceCriteria(min_items=6, required_fields=required, min_content_chars=400)


def coerce_overrides(overrides: CriteriaOverrides | Mapping[str, Any] | None) -> CriteriaOverrides | None:
    """Accept overrides as a model or as a camelCase/snake_case mapping."""
    if overrides is None or isinstance(overrides, CriteriaOverrides):
        return overrides
    return CriteriaOverrides.model_validate(dict(overrides))


def resolve_criteria(
    template: str | None, overrides: CriteriaOverrides | Mapping[str, Any] | None = None
) -> AcceptanceCriteria:
    """Merge caller overrides over the template defaults.

    Top-level keys override shallowly. required_fields merges per key, so a
    default field survives unless the override names it.

    Args:
        template: Template name
        overrides: Caller-supplied criteria, possibly partial

    Returns:
        Effective AcceptanceCriteria.

    """
    defaults = default_criteria(template)
    overrides = coerce_overrides(overrides)
    if overrides is None:
        return defaults

    update = overrides.model_dump(exclude_none=True)
    update['required_fields'] = {**defaults.required_fields, **(overrides.required_fields or {})}
    return defaults.model_copy(update=update)
