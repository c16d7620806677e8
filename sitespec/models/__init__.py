"""Pydantic models for adapter specs and evaluation results."""

from sitespec.models.results import (
    AcceptanceCriteria,
    CriteriaOverrides,
    EvaluationReport,
    GenerationOptions,
    RefinementResult,
    ValidationResult,
)
from sitespec.models.spec import (
    DEFAULT_MAX_ITEMS,
    ITEM_TEMPLATES,
    URL_FIELDS,
    AdapterSpec,
    FieldEntry,
    FieldRule,
    MatchRule,
    Template,
    as_field_rule,
)

__all__ = [
    'DEFAULT_MAX_ITEMS',
    'ITEM_TEMPLATES',
    'URL_FIELDS',
    'AcceptanceCriteria',
    'AdapterSpec',
    'CriteriaOverrides',
    'EvaluationReport',
    'FieldEntry',
    'FieldRule',
    'GenerationOptions',
    'MatchRule',
    'RefinementResult',
    'Template',
    'ValidationResult',
    'as_field_rule',
]
