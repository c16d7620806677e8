"""Structural gate for candidate adapter specs.

The gate is deliberately shallow: it only checks what the evaluator needs to run
at all. A wrong template value passes here and is rejected later by evaluation.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from sitespec.exceptions import InvalidSpecError
from sitespec.models import ITEM_TEMPLATES, AdapterSpec, ValidationResult


def _get(candidate: Mapping[str, Any], camel: str, snake: str) -> Any:
    if camel in candidate:
        return candidate[camel]
    return candidate.get(snake)


def validate_spec(candidate: Any) -> ValidationResult:
    """Check a raw candidate spec. Rules run in order and the first failure wins.

    Args:
        candidate: Parsed model output, a plain mapping, or an AdapterSpec

    Returns:
        ValidationResult with ok=False and the reason on the first failing rule.

    """
    if isinstance(candidate, AdapterSpec):
        candidate = candidate.to_json_dict()

    if not isinstance(candidate, Mapping):
        return ValidationResult(ok=False, error='spec missing')

    template = candidate.get('template')
    if not template:
        return ValidationResult(ok=False, error='template missing')

    if template in ITEM_TEMPLATES:
        if not _get(candidate, 'itemSelector', 'item_selector'):
            return ValidationResult(ok=False, error='itemSelector missing')
        if not isinstance(candidate.get('fields'), Mapping):
            return ValidationResult(ok=False, error='fields missing')

    return ValidationResult(ok=True)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = '.'.join(str(part) for part in first['loc']) or 'spec'
    return f'{location}: {first["msg"]}'


def parse_spec(candidate: Any) -> AdapterSpec:
    """Run the structural gate, then build the typed spec.

    Args:
        candidate: Parsed model output or a plain mapping

    Returns:
        Validated AdapterSpec.

    Raises:
        InvalidSpecError: If the gate fails or a value has the wrong type.

    """
    result = validate_spec(candidate)
    if not result.ok:
        raise InvalidSpecError(result.error or 'spec missing')

    if isinstance(candidate, AdapterSpec):
        return candidate

    try:
        return AdapterSpec.model_validate(candidate)
    except ValidationError as e:
        raise InvalidSpecError(_describe(e)) from e
