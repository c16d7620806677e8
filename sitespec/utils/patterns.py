"""Guarded compilation of regular expressions taken from model output.

Patterns in adapter specs come from a language model that read untrusted page
markup, so they are compiled behind a size and shape cap before use.
"""

import logging
import re
from functools import lru_cache

logger = logging.getLogger(__name__)

MAX_PATTERN_LENGTH = 256
MAX_SUBJECT_LENGTH = 10_000

# A quantified group that itself ends in a quantifier, e.g. (a+)+ or (\w*)*
_NESTED_QUANTIFIER = re.compile(r'\((?:[^()\\]|\\.)*[+*}]\)\s*(?:[+*]|\{\d*,\d*\})')


@lru_cache(maxsize=512)
def compile_guarded(pattern: str) -> re.Pattern[str] | None:
    """Compile a pattern if it passes the complexity cap.

    Args:
        pattern: Regular expression source

    Returns:
        Compiled pattern, or None if the pattern is refused or does not compile.

    """
    if not pattern or len(pattern) > MAX_PATTERN_LENGTH:
        logger.debug('Refusing regex of length %d', len(pattern or ''))
        return None
    if _NESTED_QUANTIFIER.search(pattern):
        logger.debug('Refusing regex with nested quantifier: %s', pattern)
        return None
    try:
        return re.compile(pattern)
    except (re.error, OverflowError, RecursionError) as e:
        logger.debug('Regex failed to compile: %s (%s)', pattern, e)
        return None


def guarded_search(pattern: str, text: str) -> re.Match[str] | None:
    """Search text with a guarded pattern.

    Args:
        pattern: Regular expression source
        text: Subject string, capped at MAX_SUBJECT_LENGTH characters

    Returns:
        The first match, or None if there is no match or the pattern was refused.

    """
    compiled = compile_guarded(pattern)
    if compiled is None:
        return None
    return compiled.search(text[:MAX_SUBJECT_LENGTH])
