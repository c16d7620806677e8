"""Spec evaluation against page markup."""

from sitespec.core.evaluation.criteria import default_criteria, resolve_criteria
from sitespec.core.evaluation.evaluator import PageEvaluator

__all__ = ['PageEvaluator', 'default_criteria', 'resolve_criteria']
