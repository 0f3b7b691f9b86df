"""In-memory progress for single-target migrations."""

from typing import Optional

from loguru import logger

from ..errors import RecordNotFoundError
from ..models.record import MigrationRecord, Step
from .base import ProgressTracker


class MemoryProgress(ProgressTracker):
    """Tracks one synthesized record without touching the progress store."""

    def __init__(self, record: MigrationRecord):
        self.record = record
        self.logger = logger.bind(component='MemoryProgress')

    def get_record(self, slug: str) -> Optional[MigrationRecord]:
        if slug != self.record.slug:
            return None
        return self.record

    def mark_complete(self, slug: str, step: Step) -> bool:
        if self.get_record(slug) is None:
            raise RecordNotFoundError(slug)
        if self.record.has_completed(step):
            return False

        self.record = self.record.with_step(step)
        self.logger.debug(f'{slug}: steps now {self.record.steps_field}')
        return True
