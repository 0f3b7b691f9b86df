"""Git repository pushing operations."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..utils.logging import mask_credentials
from .runner import GitCommandError, GitResult, GitRunner

REMOTE_NAME = 'github'


@dataclass
class PushResult(GitResult):
    """Result of a git push operation."""

    primary_branch: Optional[str] = None


class GitPusher:
    """Pushes a local bare repository to its destination remote."""

    def __init__(self, runner: GitRunner, remote_name: str = REMOTE_NAME):
        """Initialize git pusher.

        Args:
            runner: Git command runner
            remote_name: Name of the destination remote
        """
        self.runner = runner
        self.remote_name = remote_name
        self.logger = logger.bind(component='GitPusher')

    def detect_primary_branch(self, repo_path: str) -> Optional[str]:
        """Return the branch HEAD points at, or None if it cannot be resolved."""
        head = self.runner.try_run(['git', 'symbolic-ref', 'HEAD'], repo_path)
        if not head:
            return None
        return head[len('refs/heads/') :] if head.startswith('refs/heads/') else head

    def configure_remote(self, repo_path: str, url: str) -> None:
        """Point the destination remote at ``url``, adding it if missing."""
        existing = self.runner.try_run(
            ['git', 'remote', 'get-url', self.remote_name], repo_path
        )
        action = 'set-url' if existing is not None else 'add'
        self.runner.run(['git', 'remote', action, self.remote_name, url], repo_path)

    def push_ref(self, repo_path: str, ref: str) -> None:
        self.runner.run(['git', 'push', self.remote_name, ref], repo_path)

    def push_all_branches(self, repo_path: str) -> None:
        self.runner.run(['git', 'push', self.remote_name, '--all'], repo_path)

    def push_tags(self, repo_path: str) -> None:
        self.runner.run(['git', 'push', self.remote_name, '--tags'], repo_path)

    def push_repository(
        self, repo_path: str, remote_url: str, public_url: Optional[str] = None
    ) -> PushResult:
        """Push the primary branch, then every branch, then every tag.

        The primary branch goes first so the destination picks it up as its
        default branch.

        Args:
            repo_path: Local bare repository
            remote_url: Authenticated destination URL
            public_url: URL left configured on the remote afterwards

        Returns:
            Push operation result; failed if any push failed
        """
        primary_branch = None
        try:
            self.logger.info(
                f'Adding remote {self.remote_name} -> {mask_credentials(remote_url)}'
            )
            self.configure_remote(repo_path, remote_url)

            primary_branch = self.detect_primary_branch(repo_path)
            if primary_branch:
                self.logger.info(f'Pushing default branch {primary_branch}')
                self.push_ref(repo_path, primary_branch)
            else:
                self.logger.warning(f'No default branch detected in {repo_path}')

            self.logger.info('Pushing remaining branches and tags')
            self.push_all_branches(repo_path)
            self.push_tags(repo_path)
        except GitCommandError as e:
            error_msg = f'Push operation failed: {e}'
            self.logger.error(error_msg)
            return PushResult(success=False, error=error_msg, primary_branch=primary_branch)
        finally:
            if public_url:
                self.runner.try_run(
                    ['git', 'remote', 'set-url', self.remote_name, public_url], repo_path
                )

        return PushResult(success=True, primary_branch=primary_branch)
