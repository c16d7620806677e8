"""Scores an adapter spec against the markup it was generated for."""

import math
from collections.abc import Mapping
from typing import Any

import logfire
from bs4 import BeautifulSoup
from rich.console import Console

from sitespec.core.evaluation.criteria import resolve_criteria
from sitespec.core.extraction import extract_article, extract_items
from sitespec.models import DEFAULT_MAX_ITEMS, AcceptanceCriteria, AdapterSpec, CriteriaOverrides, EvaluationReport

PLACEHOLDER_BASE_URL = 'https://example.com'
FALLBACK_MIN_ITEMS = 4
FALLBACK_MIN_CONTENT_CHARS = 400
PRICE_DIAGNOSTIC_THRESHOLD = 0.2


def _percent(rate: float) -> int:
    return math.floor(rate * 100 + 0.5)


def _rate(rate: float) -> float:
    # Two decimals, halves rounded up
    return _percent(rate) / 100


class PageEvaluator:
    """Re-derives structured data from markup with a spec and measures coverage.

    Evaluation is deterministic and never raises for page-derived faults: the
    verdict is carried entirely by the report's ok flag and issues.

    Attributes:
        console: Optional Rich console for a one-line verdict per evaluation

    """

    def __init__(self, console: Console | None = None):
        """Initialize the PageEvaluator."""
        self.console = console

    @logfire.instrument('evaluate_spec', extract_args=False)
    def evaluate(
        self,
        spec: AdapterSpec,
        markup: str,
        template_hint: str | None = None,
        criteria: CriteriaOverrides | Mapping[str, Any] | None = None,
        url: str | None = None,
    ) -> EvaluationReport:
        """Run a spec against markup and build an acceptance report.

        Checks accumulate rather than short-circuit, except that a list-shaped spec
        without an item selector stops right away.

        Args:
            spec: Candidate adapter spec
            markup: Page HTML
            template_hint: Template the caller expects, if any
            criteria: Caller overrides merged over the template defaults
            url: Page URL used to resolve relative links

        Returns:
            EvaluationReport for this spec on this page.

        """
        soup = BeautifulSoup(markup, 'lxml')
        base_url = url or PLACEHOLDER_BASE_URL
        effective = resolve_criteria(spec.template, criteria)
        report = EvaluationReport(template=spec.template)

        if template_hint and spec.template != template_hint:
            report.reject(f'template mismatch (expected {template_hint}, got {spec.template})')

        if spec.is_item_template:
            if not spec.item_selector:
                report.reject('itemSelector missing')
                self._print_report(report)
                return report
            self._evaluate_items(soup, spec, base_url, effective, report)

        if spec.template == 'article':
            self._evaluate_article(soup, spec, base_url, effective, report)

        logfire.info('Spec evaluated', template=spec.template, ok=report.ok, issues=report.issues)
        self._print_report(report)
        return report

    def _evaluate_items(
        self,
        soup: BeautifulSoup,
        spec: AdapterSpec,
        base_url: str,
        criteria: AcceptanceCriteria,
        report: EvaluationReport,
    ) -> None:
        max_items = criteria.max_items or spec.max_items or DEFAULT_MAX_ITEMS
        items = extract_items(soup, spec, base_url, limit=max_items)
        report.counts['items'] = len(items)

        min_items = criteria.min_items or FALLBACK_MIN_ITEMS
        if len(items) < min_items:
            report.reject(f'found {len(items)} items (< {min_items})')

        total = len(items) or 1
        required = criteria.required_fields
        for field_name, threshold in required.items():
            rate = sum(1 for item in items if item.get(field_name)) / total
            report.counts[f'{field_name}Rate'] = _rate(rate)
            if rate < threshold:
                report.reject(f'{field_name} coverage {_percent(rate)}% (< {_percent(threshold)}%)')

        # Informational only: never flips ok.
        if spec.template == 'shopping' and not required.get('price') and not required.get('brand'):
            price_rate = sum(1 for item in items if item.get('price')) / total
            report.counts['priceRate'] = _rate(price_rate)
            if price_rate < PRICE_DIAGNOSTIC_THRESHOLD:
                report.issues.append('low price coverage')

    def _evaluate_article(
        self,
        soup: BeautifulSoup,
        spec: AdapterSpec,
        base_url: str,
        criteria: AcceptanceCriteria,
        report: EvaluationReport,
    ) -> None:
        content = extract_article(soup, spec, base_url)['content']
        report.counts['contentLength'] = len(content)

        min_chars = criteria.min_content_chars or FALLBACK_MIN_CONTENT_CHARS
        if len(content) < min_chars:
            report.reject(f'content too short ({len(content)} < {min_chars})')

    def _print_report(self, report: EvaluationReport) -> None:
        if not self.console:
            return

        counts = ', '.join(f'{key}={value}' for key, value in report.counts.items())
        if report.ok:
            self.console.print(f'  ✓ {report.template}: accepted ({counts})')
        else:
            self.console.print(f'  ✗ {report.template}: rejected ({counts})')
            for issue in report.issues:
                self.console.print(f'      → {issue}')
