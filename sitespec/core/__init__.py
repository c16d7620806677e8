"""Core adapter generation, evaluation and refinement components."""

from sitespec.core.evaluation import PageEvaluator, default_criteria, resolve_criteria
from sitespec.core.extraction import extract_field
from sitespec.core.fetcher import HTMLFetcher
from sitespec.core.generation import AdapterGenerator, LLMConfig
from sitespec.core.refinement import AdapterRefiner
from sitespec.core.validation import parse_spec, validate_spec

__all__ = [
    'AdapterGenerator',
    'AdapterRefiner',
    'HTMLFetcher',
    'LLMConfig',
    'PageEvaluator',
    'default_criteria',
    'extract_field',
    'parse_spec',
    'resolve_criteria',
    'validate_spec',
]
