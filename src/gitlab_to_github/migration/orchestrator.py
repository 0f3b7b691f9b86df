"""Batch and single-target migration orchestrators."""

import re
from typing import Optional, Set

from loguru import logger

from ..config.config import SourceConfig
from ..errors import RecordNotFoundError
from ..models.outcome import MigrationSummary, OutcomeStatus, StepOutcome
from ..models.record import STEP_SEQUENCE, MigrationRecord
from ..store.base import ProgressTracker
from ..store.memory import MemoryProgress
from ..store.progress import ProgressStore
from .executor import StepExecutor

_SLUG_PATTERN = re.compile(r'^[A-Za-z0-9._-]+$')


def is_safe_slug(slug: str) -> bool:
    """Whether ``slug`` is usable as a single path component and repo name."""
    return bool(_SLUG_PATTERN.match(slug)) and slug not in ('.', '..')


def drive_record(
    executor: StepExecutor, progress: ProgressTracker, slug: str
) -> StepOutcome:
    """Call the executor until ``slug`` is completed or a step fails.

    The record is re-read from ``progress`` before every step so edits made
    to the store between steps are honoured.
    """
    # One call per step plus the call that reports completion
    for _ in range(len(STEP_SEQUENCE) + 1):
        record = progress.get_record(slug)
        if record is None:
            return StepOutcome.skipped(slug, 'record no longer present')

        outcome = executor.execute_pending_steps(record)
        if outcome.is_terminal:
            return outcome

    return StepOutcome.failed(slug, 'unknown', 'steps did not converge')


class BatchOrchestrator:
    """Migrates every eligible repository listed in the progress store."""

    def __init__(
        self, store: ProgressStore, executor: StepExecutor, source: SourceConfig
    ):
        """Initialize batch orchestrator.

        Args:
            store: Progress store providing the work batch
            executor: Step executor recording into ``store``
            source: Source settings used to filter rows
        """
        self.store = store
        self.executor = executor
        self.source = source
        self.logger = logger.bind(component='BatchOrchestrator')

    def skip_reason(self, record: MigrationRecord, seen: Set[str]) -> Optional[str]:
        """Return why ``record`` is not eligible, or None if it is.

        Every non-empty slug is added to ``seen``, eligible or not. Store
        lookups resolve a slug to its first row, so any later row with the
        same slug must be skipped.
        """
        if not record.slug:
            return 'empty slug'
        if record.slug in seen:
            return f'duplicate slug {record.slug}'
        seen.add(record.slug)

        if not is_safe_slug(record.slug):
            return f'slug {record.slug!r} is not a valid directory name'
        if not record.source_url:
            return 'empty source URL'
        if not self.source.matches(record.source_url):
            return f'source URL {record.source_url} is not a source repository'
        return None

    def run_batch(self) -> MigrationSummary:
        """Process the work batch sequentially.

        A failing repository is logged and the batch moves on. Errors reading
        or replacing the store propagate and halt the batch.

        Returns:
            Summary of completed, failed and skipped repositories
        """
        summary = MigrationSummary()
        seen: Set[str] = set()

        self.logger.info(f'Starting migration from {self.store.path}')

        for row in self.store.read_records():
            record = row.record
            reason = self.skip_reason(record, seen)
            if reason:
                self.logger.warning(f'[SKIP] line {row.line_number}: {reason}')
                summary.add(StepOutcome.skipped(record.slug, reason))
                continue

            try:
                outcome = drive_record(self.executor, self.store, record.slug)
            except RecordNotFoundError:
                outcome = StepOutcome.skipped(record.slug, 'record no longer present')

            if outcome.status == OutcomeStatus.FAILED:
                self.logger.error(
                    f'{record.slug}: migration stopped at {outcome.step}: {outcome.cause}'
                )
            elif outcome.status == OutcomeStatus.SKIPPED:
                self.logger.warning(f'[SKIP] {record.slug}: {outcome.reason}')
            summary.add(outcome)

        summary.finish()
        self.logger.info(
            f'Migration process finished: {summary.completed} completed, '
            f'{summary.failed} failed, {summary.skipped} skipped'
        )
        return summary


class SingleTargetOrchestrator:
    """Migrates one ad-hoc repository without touching the progress store."""

    def __init__(self, executor: StepExecutor):
        self.executor = executor
        self.logger = logger.bind(component='SingleTargetOrchestrator')

    def run_single(self, source_url: str, slug: str) -> StepOutcome:
        """Drive a synthesized record with no completed steps to the end.

        Args:
            source_url: Source repository URL
            slug: Local directory and destination repository name

        Returns:
            ``completed``, ``failed`` or ``skipped`` for an empty or unsafe slug
        """
        record = MigrationRecord(source_url=source_url, slug=slug)
        if not record.is_valid:
            self.logger.error('Repository slug is required')
            return StepOutcome.skipped(record.slug, 'empty slug')
        if not is_safe_slug(record.slug):
            self.logger.error(f'Slug {record.slug!r} is not a valid directory name')
            return StepOutcome.skipped(record.slug, 'invalid slug')

        self.logger.info(
            f'Starting direct migration of {record.source_url} to GitHub as {record.slug}'
        )

        progress = MemoryProgress(record)
        outcome = drive_record(
            self.executor.with_progress(progress), progress, record.slug
        )

        if outcome.status == OutcomeStatus.COMPLETED:
            self.logger.info('Direct migration completed successfully.')
        return outcome
