"""Data models for migration progress."""

from .record import (
    STEP_DELIMITER,
    STEP_SEQUENCE,
    MigrationRecord,
    Step,
    StoreRow,
    format_steps,
    parse_steps,
)
from .outcome import MigrationSummary, OutcomeStatus, StepOutcome

__all__ = [
    'STEP_DELIMITER',
    'STEP_SEQUENCE',
    'MigrationRecord',
    'Step',
    'StoreRow',
    'format_steps',
    'parse_steps',
    'MigrationSummary',
    'OutcomeStatus',
    'StepOutcome',
]
