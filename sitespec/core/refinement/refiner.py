"""Bounded generate, evaluate and feed-back loop for repairing adapter specs."""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

import logfire
from rich.console import Console

from sitespec.core.evaluation import PageEvaluator
from sitespec.core.evaluation.criteria import coerce_overrides
from sitespec.core.generation import AdapterGenerator
from sitespec.models import AdapterSpec, CriteriaOverrides, EvaluationReport, GenerationOptions, RefinementResult

DEFAULT_MAX_ITERATIONS = 4


class AdapterRefiner:
    """Iteratively repairs a spec by feeding evaluation reports back into generation.

    Each iteration sees only the immediately preceding spec and report. The loop
    never fails on a low-quality spec: it returns the last candidate and lets the
    caller decide from report.ok. Generation errors still propagate.

    Attributes:
        generator: Produces candidate specs
        evaluator: Scores candidates against the page
        console: Optional Rich console for per-iteration output

    """

    def __init__(
        self,
        generator: AdapterGenerator,
        evaluator: PageEvaluator | None = None,
        console: Console | None = None,
    ):
        """Initialize the refiner.

        Args:
            generator: Adapter generator used on every iteration
            evaluator: Page evaluator; a silent one is created if omitted
            console: Rich console instance for formatted output

        """
        self.generator = generator
        self.evaluator = evaluator or PageEvaluator()
        self.console = console

    @logfire.instrument('refine_adapter', extract_args=False)
    async def refine(
        self,
        url: str,
        html: str,
        template_hint: str | None = None,
        mode_label: str | None = None,
        search_box: bool | None = None,
        criteria: CriteriaOverrides | Mapping[str, Any] | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> RefinementResult:
        """Generate and evaluate until a spec is accepted or the budget runs out.

        Args:
            url: Target page URL
            html: Page markup, reused unchanged on every iteration
            template_hint: Template the caller expects
            mode_label: Presentation hint for the model
            search_box: Presentation hint for the model
            criteria: Acceptance criteria overrides
            max_iterations: Upper bound on generate+evaluate round trips

        Returns:
            RefinementResult with the accepted spec, or the last failing one.

        Raises:
            GenerationError: If the model output stays malformed within one iteration.
            ModelCallError: If the provider request fails.

        """
        max_iterations = max(1, max_iterations or DEFAULT_MAX_ITERATIONS)
        overrides = coerce_overrides(criteria)
        base_options = GenerationOptions(
            template_hint=template_hint,
            mode_label=mode_label,
            search_box=search_box,
            criteria=overrides,
        )

        last_spec: AdapterSpec | None = None
        last_report: EvaluationReport | None = None
        history: list[EvaluationReport] = []

        for iteration in range(1, max_iterations + 1):
            self._print(f'[step]Iteration {iteration}/{max_iterations}: generating spec...[/step]')
            options = replace(base_options, previous_spec=last_spec, evaluation=last_report, iteration=iteration)
            spec = await self.generator.generate(url, html, options)

            report = self.evaluator.evaluate(spec, html, template_hint=template_hint, criteria=overrides, url=url)
            history.append(report)
            logfire.info('Refinement iteration', url=url, iteration=iteration, ok=report.ok, issues=report.issues)

            if report.ok:
                self._print(f'[success]✓ Spec accepted after {iteration} iteration(s)[/success]')
                return RefinementResult(spec=spec, report=report, iterations=iteration, history=history)

            self._print(f'[warning]⚠ Spec rejected: {"; ".join(report.issues)}[/warning]')
            last_spec = spec
            last_report = report

        assert last_spec is not None and last_report is not None
        logfire.warn('Refinement exhausted', url=url, iterations=max_iterations, issues=last_report.issues)
        return RefinementResult(spec=last_spec, report=last_report, iterations=max_iterations, history=history)

    def _print(self, message: str) -> None:
        if self.console:
            self.console.print(message)
