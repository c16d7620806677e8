"""Utility components for sitespec."""

from sitespec.utils.files import get_project_root, get_store_path, init_sitespec, is_initialized
from sitespec.utils.logging import setup_local_logging
from sitespec.utils.patterns import compile_guarded, guarded_search
from sitespec.utils.prompts import load_prompt
from sitespec.utils.retry import get_retryer

__all__ = [
    'compile_guarded',
    'get_project_root',
    'get_retryer',
    'get_store_path',
    'guarded_search',
    'init_sitespec',
    'is_initialized',
    'load_prompt',
    'setup_local_logging',
]
