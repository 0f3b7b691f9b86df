"""Repository integrity check and repacking."""

from loguru import logger

from .runner import GitCommandError, GitResult, GitRunner

MAINTENANCE_COMMANDS = [
    ['git', 'fsck'],
    ['git', 'gc', '--aggressive', '--prune=all'],
    ['git', 'repack', '-a', '-d', '--depth=250', '--window=250'],
]


class GitMaintenance:
    """Verifies and compacts a repository before it is pushed."""

    def __init__(self, runner: GitRunner):
        self.runner = runner
        self.logger = logger.bind(component='GitMaintenance')

    def run(self, repo_path: str) -> GitResult:
        self.logger.info(f'Verifying and repacking {repo_path}')

        for cmd in MAINTENANCE_COMMANDS:
            try:
                self.runner.run(cmd, repo_path)
            except GitCommandError as e:
                error_msg = f'Repository maintenance failed: {e}'
                self.logger.error(error_msg)
                return GitResult(success=False, error=error_msg)

        return GitResult(success=True)
