"""Markup fetching."""

from sitespec.core.fetcher.fetcher import DEFAULT_MAX_HTML_BYTES, HTMLFetcher

__all__ = ['DEFAULT_MAX_HTML_BYTES', 'HTMLFetcher']
