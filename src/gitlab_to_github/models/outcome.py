"""Per-repository outcomes and run summaries."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class OutcomeStatus(str, Enum):
    """Result of driving a repository through the step executor."""

    COMPLETED = 'completed'
    ADVANCED = 'advanced'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class StepOutcome(BaseModel):
    """Outcome of one executor call or one orchestrated repository."""

    slug: str = Field(..., description='Repository slug')
    status: OutcomeStatus = Field(..., description='Outcome status')
    step: Optional[str] = Field(default=None, description='Step acted upon')
    cause: Optional[str] = Field(default=None, description='Failure cause')
    reason: Optional[str] = Field(default=None, description='Skip reason')

    @classmethod
    def completed(cls, slug: str) -> 'StepOutcome':
        return cls(slug=slug, status=OutcomeStatus.COMPLETED)

    @classmethod
    def advanced(cls, slug: str, step: str) -> 'StepOutcome':
        return cls(slug=slug, status=OutcomeStatus.ADVANCED, step=step)

    @classmethod
    def failed(cls, slug: str, step: str, cause: str) -> 'StepOutcome':
        return cls(slug=slug, status=OutcomeStatus.FAILED, step=step, cause=cause)

    @classmethod
    def skipped(cls, slug: str, reason: str) -> 'StepOutcome':
        return cls(slug=slug, status=OutcomeStatus.SKIPPED, reason=reason)

    @property
    def is_terminal(self) -> bool:
        """Whether the orchestrator should stop driving this repository."""
        return self.status != OutcomeStatus.ADVANCED


class MigrationSummary(BaseModel):
    """Summary of a batch run."""

    started_at: datetime = Field(
        default_factory=datetime.now, description='Run start time'
    )
    completed_at: Optional[datetime] = Field(
        default=None, description='Run completion time'
    )
    results: List[StepOutcome] = Field(
        default_factory=list, description='Final outcome per repository'
    )

    def add(self, outcome: StepOutcome) -> None:
        self.results.append(outcome)

    def finish(self) -> 'MigrationSummary':
        self.completed_at = datetime.now()
        return self

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def completed(self) -> int:
        return self._count(OutcomeStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failures(self) -> List[StepOutcome]:
        return [r for r in self.results if r.status == OutcomeStatus.FAILED]

    def counts(self) -> Dict[str, int]:
        """Tally of outcomes keyed by status name."""
        return {
            'total': self.total,
            'completed': self.completed,
            'failed': self.failed,
            'skipped': self.skipped,
        }
