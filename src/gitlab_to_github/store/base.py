"""Progress tracker interface shared by the CSV store and in-memory progress."""

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import RecordNotFoundError
from ..models.record import MigrationRecord, Step


class ProgressTracker(ABC):
    """Durable or ephemeral mapping from slug to completed steps."""

    @abstractmethod
    def get_record(self, slug: str) -> Optional[MigrationRecord]:
        """Read the current record for ``slug``.

        Args:
            slug: Repository slug

        Returns:
            The record, or None if no record carries the slug
        """
        pass

    @abstractmethod
    def mark_complete(self, slug: str, step: Step) -> bool:
        """Append ``step`` to the record's completed steps if absent.

        Args:
            slug: Repository slug
            step: Step that just succeeded

        Returns:
            True if the record changed, False if the step was already present
        """
        pass

    def load_next_pending_step(self, slug: str) -> Optional[Step]:
        """Return the first step not yet completed for ``slug``.

        Raises:
            RecordNotFoundError: If no record carries the slug
        """
        record = self.get_record(slug)
        if record is None:
            raise RecordNotFoundError(slug)
        return record.next_pending_step()
