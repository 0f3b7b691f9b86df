"""Deletion of migrated repositories from the destination organization.

Deletion only acts on GitHub. The progress store is read for slugs and is
never modified, so a later migration run still sees its recorded steps.
"""

from loguru import logger

from ..api.client import GitHubClient
from ..api.exceptions import GitHubAPIError
from ..models.outcome import MigrationSummary, StepOutcome
from ..store.progress import ProgressStore


class DeletionService:
    """Deletes destination repositories by slug."""

    def __init__(self, github: GitHubClient, org: str):
        self.github = github
        self.org = org
        self.logger = logger.bind(component='DeletionService')

    def delete_single(self, slug: str) -> bool:
        """Delete ``<org>/<slug>``.

        Returns:
            True if GitHub confirmed the deletion
        """
        slug = slug.strip()
        if not slug:
            self.logger.error('Repository name is required for single deletion')
            return False

        self.logger.info(f'Deleting repo {slug} from GitHub org {self.org}')
        try:
            self.github.delete_repository(self.org, slug)
        except GitHubAPIError as e:
            self.logger.error(f'Failed to delete {slug}: {e}')
            return False

        self.logger.info(f'Successfully deleted {slug}.')
        return True

    def delete_all(self, store: ProgressStore) -> MigrationSummary:
        """Delete every repository listed in ``store``."""
        summary = MigrationSummary()
        self.logger.info(f'Starting deletion process for all repos in {store.path}')

        for row in store.read_records():
            slug = row.record.slug
            if not slug:
                self.logger.warning(f'[SKIP] Empty repo name on line {row.line_number}.')
                summary.add(StepOutcome.skipped(slug, 'empty slug'))
                continue

            if self.delete_single(slug):
                summary.add(StepOutcome.completed(slug))
            else:
                summary.add(StepOutcome.failed(slug, 'deleted', 'deletion failed'))

        summary.finish()
        self.logger.info(
            f'Deletion process finished: {summary.completed} deleted, '
            f'{summary.failed} failed, {summary.skipped} skipped'
        )
        return summary
