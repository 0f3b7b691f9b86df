"""Migration record and step models."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, validator

STEP_DELIMITER = '>'


class Step(str, Enum):
    """Named unit of migration work tracked per repository."""

    CLONED = 'cloned'
    PUSHED = 'pushed'


# Execution order; a step never runs before every earlier step is recorded.
STEP_SEQUENCE: Tuple[Step, ...] = (Step.CLONED, Step.PUSHED)


def parse_steps(value: Optional[str]) -> List[str]:
    """Parse a delimiter-joined step list into an ordered, de-duplicated list.

    Args:
        value: Raw field value such as ``cloned>pushed``

    Returns:
        Step names in order of first appearance
    """
    steps: List[str] = []
    if not value:
        return steps

    for part in value.split(STEP_DELIMITER):
        name = part.strip()
        if name and name not in steps:
            steps.append(name)
    return steps


def format_steps(steps: List[str]) -> str:
    """Join step names with the store delimiter."""
    return STEP_DELIMITER.join(steps)


class MigrationRecord(BaseModel):
    """Progress record for a single repository."""

    source_url: str = Field(..., description='Canonical source repository URL')
    slug: str = Field(..., description='Local directory and destination repo name')
    completed_steps: List[str] = Field(
        default_factory=list, description='Completed steps in order of completion'
    )

    @validator('source_url', 'slug')
    def strip_whitespace(cls, v):
        """Strip surrounding whitespace from identifiers."""
        return v.strip()

    @validator('completed_steps')
    def dedupe_steps(cls, v):
        """Drop repeated step names while keeping first-completion order."""
        seen: List[str] = []
        for name in v:
            if name not in seen:
                seen.append(name)
        return seen

    @property
    def is_valid(self) -> bool:
        """Whether the record has a usable slug."""
        return bool(self.slug)

    def has_completed(self, step: Step) -> bool:
        """Check whether a step has been recorded."""
        return step.value in self.completed_steps

    def next_pending_step(self) -> Optional[Step]:
        """Return the first step in sequence order that is not yet recorded."""
        for step in STEP_SEQUENCE:
            if not self.has_completed(step):
                return step
        return None

    def with_step(self, step: Step) -> 'MigrationRecord':
        """Return a copy of the record with ``step`` appended if absent."""
        if self.has_completed(step):
            return self
        return MigrationRecord(
            source_url=self.source_url,
            slug=self.slug,
            completed_steps=self.completed_steps + [step.value],
        )

    @property
    def steps_field(self) -> str:
        """Serialized form of ``completed_steps``."""
        return format_steps(self.completed_steps)


class StoreRow(BaseModel):
    """A data row read from the progress store."""

    line_number: int = Field(..., description='1-based line number in the store')
    record: MigrationRecord = Field(..., description='Parsed migration record')
