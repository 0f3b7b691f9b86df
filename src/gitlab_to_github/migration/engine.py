"""Migration engine - wires configuration into the orchestrators."""

from typing import Optional

from loguru import logger

from ..api.client import GitHubClientFactory
from ..config.config import Config
from ..git.operations import GitOperations
from ..models.outcome import MigrationSummary, StepOutcome
from ..store.base import ProgressTracker
from ..store.progress import ProgressStore
from .deletion import DeletionService
from .executor import StepExecutor
from .orchestrator import BatchOrchestrator, SingleTargetOrchestrator


class MigrationEngine:
    """Builds collaborators from a validated configuration and runs commands."""

    def __init__(self, config: Config):
        """Initialize migration engine.

        Args:
            config: Configuration already checked with ``Config.require``
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.github = GitHubClientFactory.create_client(config.destination)
        self.git = GitOperations(config.git, source_token=config.source.token)

    def _store(self) -> ProgressStore:
        return ProgressStore(self.config.store.csv_file, self.config.store.tmp_file)

    def _executor(self, progress: Optional[ProgressTracker]) -> StepExecutor:
        return StepExecutor(progress, self.git, self.github, self.config.destination)

    def _test_connectivity(self) -> None:
        """Check the destination token before any repository is touched.

        Raises:
            ConnectionError: If GitHub rejects the token or is unreachable
        """
        self.logger.info('Testing connectivity to GitHub')
        if not self.github.test_connection():
            raise ConnectionError('Cannot authenticate against GitHub')

    def migrate(self) -> MigrationSummary:
        """Run the batch migration over the configured progress store."""
        self._test_connectivity()
        store = self._store()
        orchestrator = BatchOrchestrator(
            store, self._executor(store), self.config.source
        )
        return orchestrator.run_batch()

    def migrate_single(self, source_url: str, slug: str) -> StepOutcome:
        """Migrate one repository without progress tracking."""
        self._test_connectivity()
        orchestrator = SingleTargetOrchestrator(self._executor(None))
        return orchestrator.run_single(source_url, slug)

    def delete_all(self) -> MigrationSummary:
        """Delete every store slug from the destination organization."""
        service = DeletionService(self.github, self.config.destination.org)
        return service.delete_all(self._store())

    def delete_single(self, slug: str) -> bool:
        """Delete one destination repository."""
        service = DeletionService(self.github, self.config.destination.org)
        return service.delete_single(slug)

    def close(self) -> None:
        self.github.close()
