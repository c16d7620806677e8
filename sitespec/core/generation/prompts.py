"""Prompt assembly for adapter generation."""

import json

from sitespec.models import GenerationOptions

DEFAULT_MAX_HTML_CHARS = 200_000


def _dump(value: object) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def build_prompt(
    guide: str,
    url: str,
    html: str,
    options: GenerationOptions,
    error_hint: str = '',
    max_html_chars: int = DEFAULT_MAX_HTML_CHARS,
) -> str:
    """Build the full generation prompt.

    Args:
        guide: Fixed guide describing the spec schema and field rule grammar
        url: Target page URL
        html: Page markup, truncated to max_html_chars
        options: Hints, criteria and the previous iteration's spec and report
        error_hint: Reason the previous attempt's output was rejected
        max_html_chars: Markup budget

    Returns:
        Prompt text.

    """
    hints = []
    if options.template_hint:
        hints.append(f'template hint: {options.template_hint}')
    if options.mode_label:
        hints.append(f'modeLabel hint: {options.mode_label}')
    if isinstance(options.search_box, bool):
        hints.append(f'searchBox hint: {"true" if options.search_box else "false"}')
    if options.criteria is not None:
        hints.append(f'criteria: {json.dumps(options.criteria.to_json_dict())}')
    if options.iteration:
        hints.append(f'iteration: {options.iteration}')

    feedback = []
    if options.evaluation is not None:
        feedback.append(f'evaluation report:\n{_dump(options.evaluation.model_dump(mode="json"))}')
    if options.previous_spec is not None:
        feedback.append(f'previous spec (revise it):\n{_dump(options.previous_spec.to_json_dict())}')

    parts = [guide, f'url: {url}']
    if hints:
        parts.append('\n'.join(hints))
    parts.append(f'html (truncated):\n{html[:max_html_chars]}')
    if feedback:
        parts.append('\n\n'.join(feedback))
    if error_hint:
        parts.append(f'validation error: {error_hint}\nfix and return json only.')

    return '\n'.join(parts) + '\n'
