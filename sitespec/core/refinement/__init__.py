"""Recursive refinement of generated adapter specs."""

from sitespec.core.refinement.refiner import DEFAULT_MAX_ITERATIONS, AdapterRefiner

__all__ = ['DEFAULT_MAX_ITERATIONS', 'AdapterRefiner']
