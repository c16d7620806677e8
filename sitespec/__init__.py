"""sitespec - LLM-generated site adapters with self-evaluation.

Generate once, evaluate against the page, refine until it extracts.
"""

from sitespec.config import Settings
from sitespec.core import (
    AdapterGenerator,
    AdapterRefiner,
    HTMLFetcher,
    LLMConfig,
    PageEvaluator,
    default_criteria,
    extract_field,
    parse_spec,
    resolve_criteria,
    validate_spec,
)
from sitespec.core.generation import create_agent, create_model, gemini, groq, openai
from sitespec.exceptions import (
    AdapterParseError,
    FetchError,
    GenerationError,
    InvalidSpecError,
    InvalidURLError,
    ModelCallError,
    SiteSpecError,
)
from sitespec.models import (
    AcceptanceCriteria,
    AdapterSpec,
    CriteriaOverrides,
    EvaluationReport,
    FieldRule,
    GenerationOptions,
    MatchRule,
    RefinementResult,
    ValidationResult,
)
from sitespec.service import AdapterService, LookupResult
from sitespec.storage import AdapterStore, InFlightRegistry
from sitespec.utils import init_sitespec

__all__ = [
    # Service
    'AdapterService',
    'LookupResult',
    'Settings',
    # Core components
    'AdapterGenerator',
    'AdapterRefiner',
    'HTMLFetcher',
    'PageEvaluator',
    'default_criteria',
    'extract_field',
    'parse_spec',
    'resolve_criteria',
    'validate_spec',
    # Storage
    'AdapterStore',
    'InFlightRegistry',
    # LLM configuration
    'LLMConfig',
    'create_model',
    'create_agent',
    'groq',
    'gemini',
    'openai',
    # Models
    'AcceptanceCriteria',
    'AdapterSpec',
    'CriteriaOverrides',
    'EvaluationReport',
    'FieldRule',
    'GenerationOptions',
    'MatchRule',
    'RefinementResult',
    'ValidationResult',
    # Exceptions
    'AdapterParseError',
    'FetchError',
    'GenerationError',
    'InvalidSpecError',
    'InvalidURLError',
    'ModelCallError',
    'SiteSpecError',
    # Utilities
    'init_sitespec',
]
