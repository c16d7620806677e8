"""Models for acceptance criteria, evaluation reports and loop results."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from sitespec.models.spec import AdapterSpec, CamelModel


class AcceptanceCriteria(CamelModel):
    """Thresholds a spec must meet on a page to be accepted.

    Attributes:
        min_items: Minimum number of extracted items
        required_fields: Field name to minimum coverage rate in [0, 1]
        min_content_chars: Minimum plain-text article length
        max_items: Optional item cap applied before the spec's own maxItems

    """

    min_items: int | None = None
    required_fields: dict[str, float] = Field(default_factory=dict)
    min_content_chars: int | None = None
    max_items: int | None = None


class CriteriaOverrides(CamelModel):
    """Caller-supplied criteria. Only the keys that are set override the defaults."""

    min_items: int | None = None
    required_fields: dict[str, float] | None = None
    min_content_chars: int | None = None
    max_items: int | None = None


class ValidationResult(BaseModel):
    """Outcome of the structural spec gate."""

    ok: bool
    error: str | None = None


class EvaluationReport(BaseModel):
    """Coverage and acceptance report for one spec on one page.

    Attributes:
        ok: True when every acceptance check passed
        template: Template the spec claims
        issues: Human readable rejection reasons, accumulated in check order
        counts: Item count, per-field coverage rates and article content length

    """

    ok: bool = True
    template: str | None = None
    issues: list[str] = Field(default_factory=list)
    counts: dict[str, int | float] = Field(default_factory=dict)

    def reject(self, issue: str) -> None:
        """Mark the report as failing and record why."""
        self.ok = False
        self.issues.append(issue)


@dataclass
class GenerationOptions:
    """Hints and feedback threaded into a generation prompt.

    Attributes:
        template_hint: Template the caller expects
        mode_label: Presentation hint passed through to the model
        search_box: Presentation hint passed through to the model
        criteria: Caller-supplied acceptance criteria, shown to the model
        previous_spec: Spec from the preceding iteration, to be revised
        evaluation: Report from the preceding iteration
        iteration: Refinement iteration number (1-based)

    """

    template_hint: str | None = None
    mode_label: str | None = None
    search_box: bool | None = None
    criteria: CriteriaOverrides | None = None
    previous_spec: AdapterSpec | None = None
    evaluation: EvaluationReport | None = None
    iteration: int | None = None


@dataclass
class RefinementResult:
    """Final spec/report pair of a refinement run."""

    spec: AdapterSpec
    report: EvaluationReport
    iterations: int
    history: list[EvaluationReport] = field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize in the shape returned to callers of the recursive generator."""
        return {
            'adapter': self.spec.to_json_dict(),
            'evaluation': self.report.model_dump(mode='json'),
            'iterations': self.iterations,
        }
