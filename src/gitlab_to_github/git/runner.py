"""Blocking git subprocess runner."""

import subprocess
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from ..utils.logging import mask_credentials


class GitCommandError(Exception):
    """A git command exited non-zero, timed out or could not be started."""

    def __init__(self, cmd: List[str], message: str, returncode: Optional[int] = None):
        self.cmd = [mask_credentials(part) for part in cmd]
        self.returncode = returncode
        super().__init__(f'{" ".join(self.cmd)}: {mask_credentials(message)}')


@dataclass
class GitResult:
    """Result of a git operation."""

    success: bool
    error: Optional[str] = None


class GitRunner:
    """Runs git commands synchronously with a timeout."""

    def __init__(self, timeout: int = 3600):
        """Initialize git runner.

        Args:
            timeout: Seconds before a command is killed
        """
        self.timeout = timeout
        self.logger = logger.bind(component='GitRunner')

    def run(self, cmd: List[str], work_dir: Optional[str] = None) -> str:
        """Run a git command.

        Args:
            cmd: Git command as list
            work_dir: Working directory

        Returns:
            Stripped stdout

        Raises:
            GitCommandError: If the command fails or times out
        """
        self.logger.debug(
            f'Running git command: {mask_credentials(" ".join(cmd))} in {work_dir or "."}'
        )

        try:
            process = subprocess.run(
                cmd,
                cwd=work_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise GitCommandError(cmd, f'timed out after {self.timeout} seconds')
        except OSError as e:
            raise GitCommandError(cmd, f'could not be started: {e}')

        if process.stderr:
            self.logger.debug(f'Git stderr: {mask_credentials(process.stderr.strip())}')

        if process.returncode != 0:
            error_output = process.stderr.strip() if process.stderr else 'Unknown error'
            raise GitCommandError(cmd, error_output, returncode=process.returncode)

        return process.stdout.strip()

    def try_run(self, cmd: List[str], work_dir: Optional[str] = None) -> Optional[str]:
        """Run a git command, returning None instead of raising on failure."""
        try:
            return self.run(cmd, work_dir)
        except GitCommandError as e:
            self.logger.debug(f'Git command failed: {e}')
            return None
