"""Structural validation of candidate adapter specs."""

from sitespec.core.validation.validator import parse_spec, validate_spec

__all__ = ['parse_spec', 'validate_spec']
