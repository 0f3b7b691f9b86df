"""Idempotent per-repository step execution."""

import os
from typing import Optional

from loguru import logger

from ..api.client import GitHubClient
from ..api.exceptions import GitHubAPIError, GitHubRepositoryExistsError
from ..config.config import DestinationConfig
from ..errors import StepFailure
from ..git.operations import GitOperations
from ..models.outcome import StepOutcome
from ..models.record import MigrationRecord, Step
from ..store.base import ProgressTracker

_ACTIONS = {Step.CLONED: 'clone', Step.PUSHED: 'push'}


class StepExecutor:
    """Runs the next pending step of one repository and records it.

    A step is recorded in the progress tracker only after every external
    operation belonging to it succeeded. Side effects of a failed step are
    left in place; the step is simply attempted again on the next run.
    """

    def __init__(
        self,
        progress: Optional[ProgressTracker],
        git: GitOperations,
        github: GitHubClient,
        destination: DestinationConfig,
    ):
        """Initialize step executor.

        Args:
            progress: Where completed steps are read from and recorded; may be
                None for an executor only used through ``with_progress``
            git: Clone, rewrite, maintenance and push collaborators
            github: Destination API client
            destination: Destination organization and creation policy
        """
        self.progress = progress
        self.git = git
        self.github = github
        self.destination = destination
        self.logger = logger.bind(component='StepExecutor')

    def with_progress(self, progress: ProgressTracker) -> 'StepExecutor':
        """Return an executor sharing collaborators but tracking elsewhere."""
        return StepExecutor(progress, self.git, self.github, self.destination)

    def execute_pending_steps(self, record: MigrationRecord) -> StepOutcome:
        """Execute at most one pending step for ``record``.

        Args:
            record: Repository to advance

        Returns:
            ``completed`` if nothing remains, ``advanced`` after one step
            succeeded and was recorded, or ``failed``

        Raises:
            RecordNotFoundError: If the tracker no longer holds the slug
            StoreIOError: If the step could not be recorded
        """
        if self.progress is None:
            raise RuntimeError('StepExecutor has no progress tracker')

        slug = record.slug
        step = self.progress.load_next_pending_step(slug)
        if step is None:
            self.logger.debug(f'{slug}: all steps complete')
            return StepOutcome.completed(slug)

        try:
            if step == Step.CLONED:
                self._clone(record)
            else:
                self._push(record)
        except StepFailure as e:
            self.logger.error(f'Failed to {_ACTIONS[step]} {slug}: {e.cause}')
            return StepOutcome.failed(slug, step.value, e.cause)

        self.progress.mark_complete(slug, step)
        self.logger.info(f'{slug}: {step.value}')
        return StepOutcome.advanced(slug, step.value)

    def _clone(self, record: MigrationRecord) -> None:
        result = self.git.cloner.clone(
            record.source_url, self.git.repository_path(record.slug)
        )
        if not result.success:
            raise StepFailure(Step.CLONED.value, result.error or 'clone failed')

    def _push(self, record: MigrationRecord) -> None:
        slug = record.slug
        org = self.destination.org
        repo_path = self.git.repository_path(slug)

        if not os.path.isdir(repo_path):
            raise StepFailure(Step.PUSHED.value, f'local clone {repo_path} is missing')

        self.logger.info(f'Pushing {slug} to GitHub org {org}')
        self._create_destination(org, slug)

        identity = self.git.identity
        if identity is not None:
            result = self.git.rewriter.rewrite_authorship(repo_path, identity)
            if not result.success:
                raise StepFailure(Step.PUSHED.value, result.error or 'rewrite failed')

        if self.git.config.maintenance:
            result = self.git.maintenance.run(repo_path)
            if not result.success:
                raise StepFailure(
                    Step.PUSHED.value, result.error or 'maintenance failed'
                )

        push = self.git.pusher.push_repository(
            repo_path,
            self.github.push_url(org, slug),
            public_url=self.github.push_url(org, slug, authenticated=False),
        )
        if not push.success:
            raise StepFailure(Step.PUSHED.value, push.error or 'push failed')

    def _create_destination(self, org: Optional[str], slug: str) -> None:
        try:
            self.github.create_repository(org, slug)
        except GitHubRepositoryExistsError as e:
            if not self.destination.allow_existing:
                raise StepFailure(
                    Step.PUSHED.value, f'destination {org}/{slug} already exists'
                ) from e
            self.logger.warning(
                f'Destination {org}/{slug} already exists, pushing into it'
            )
        except GitHubAPIError as e:
            raise StepFailure(
                Step.PUSHED.value, f'could not create {org}/{slug}: {e}'
            ) from e
