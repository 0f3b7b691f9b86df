"""Git repository cloning operations."""

import os
import shutil
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..utils.logging import mask_credentials
from .runner import GitCommandError, GitResult, GitRunner


@dataclass
class CloneResult(GitResult):
    """Result of a git clone operation."""

    repository_path: Optional[str] = None
    branches_count: int = 0
    tags_count: int = 0


class GitCloner:
    """Clones source repositories as bare repositories."""

    def __init__(self, runner: GitRunner, token: Optional[str] = None):
        """Initialize git cloner.

        Args:
            runner: Git command runner
            token: Source access token embedded into clone URLs
        """
        self.runner = runner
        self.token = token
        self.logger = logger.bind(component='GitCloner')

    def authenticated_url(self, url: str) -> str:
        """Insert ``oauth2:<token>@`` into an HTTP(S) clone URL."""
        if not self.token:
            return url

        for scheme in ('https://', 'http://'):
            if url.startswith(scheme):
                return url.replace(scheme, f'{scheme}oauth2:{self.token}@', 1)
        return url

    def clone(self, source_url: str, destination_path: str) -> CloneResult:
        """Clone every branch and tag of ``source_url`` into ``destination_path``.

        An existing directory at ``destination_path`` is removed first, so a
        clone interrupted by a previous run never blocks a retry.

        Args:
            source_url: Source repository URL
            destination_path: Bare repository directory to create

        Returns:
            Clone operation result
        """
        self.logger.info(
            f'Cloning {source_url} into {destination_path} with all branches and tags'
        )

        try:
            self._cleanup_existing_repository(destination_path)
            parent = os.path.dirname(os.path.abspath(destination_path))
            os.makedirs(parent, exist_ok=True)

            self.runner.run(
                [
                    'git',
                    'clone',
                    '--bare',
                    self.authenticated_url(source_url),
                    destination_path,
                ]
            )
            # Keep the token out of the clone's persisted config
            self.runner.run(
                ['git', 'remote', 'set-url', 'origin', source_url], destination_path
            )
        except (GitCommandError, OSError) as e:
            error_msg = mask_credentials(f'Clone operation failed: {e}')
            self.logger.error(error_msg)
            return CloneResult(success=False, error=error_msg)

        stats = self._get_repository_stats(destination_path)
        self.logger.info(
            f'Cloned {source_url}: {stats["branches"]} branches, {stats["tags"]} tags'
        )

        return CloneResult(
            success=True,
            repository_path=destination_path,
            branches_count=stats['branches'],
            tags_count=stats['tags'],
        )

    def _get_repository_stats(self, repo_path: str) -> dict:
        stats = {'branches': 0, 'tags': 0}

        branches = self.runner.try_run(
            ['git', 'for-each-ref', '--format=%(refname)', 'refs/heads'], repo_path
        )
        if branches:
            stats['branches'] = len([line for line in branches.split('\n') if line])

        tags = self.runner.try_run(['git', 'tag'], repo_path)
        if tags:
            stats['tags'] = len([line for line in tags.split('\n') if line])

        return stats

    def _cleanup_existing_repository(self, repo_path: str) -> None:
        if os.path.exists(repo_path):
            self.logger.warning(f'Removing existing clone target {repo_path}')
            shutil.rmtree(repo_path)
