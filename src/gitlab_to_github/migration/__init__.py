"""Migration engine, orchestrators and step execution."""

from .deletion import DeletionService
from .engine import MigrationEngine
from .executor import StepExecutor
from .orchestrator import (
    BatchOrchestrator,
    SingleTargetOrchestrator,
    drive_record,
    is_safe_slug,
)

__all__ = [
    'BatchOrchestrator',
    'DeletionService',
    'MigrationEngine',
    'SingleTargetOrchestrator',
    'StepExecutor',
    'drive_record',
    'is_safe_slug',
]
