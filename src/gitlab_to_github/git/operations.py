"""Git collaborators used by the step executor."""

import os
from typing import Optional

from ..config.config import GitConfig
from .clone import GitCloner
from .maintenance import GitMaintenance
from .push import GitPusher
from .rewrite import AuthorIdentity, HistoryRewriter
from .runner import GitRunner


class GitOperations:
    """Bundles the clone, rewrite, maintenance and push collaborators."""

    def __init__(
        self,
        config: GitConfig,
        source_token: Optional[str] = None,
        runner: Optional[GitRunner] = None,
    ):
        """Initialize Git operations.

        Args:
            config: Git configuration options
            source_token: Token used to authenticate clones
            runner: Command runner shared by every collaborator
        """
        self.config = config
        self.runner = runner or GitRunner(timeout=config.timeout)

        self.cloner = GitCloner(self.runner, token=source_token)
        self.pusher = GitPusher(self.runner)
        self.rewriter = HistoryRewriter(self.runner)
        self.maintenance = GitMaintenance(self.runner)

    def repository_path(self, slug: str) -> str:
        """Local bare repository path for ``slug``."""
        return os.path.join(self.config.repos_dir or '.', f'{slug}.git')

    @property
    def identity(self) -> Optional[AuthorIdentity]:
        """Identity for authorship rewriting, or None when disabled."""
        if not self.config.rewrite_authors:
            return None
        return AuthorIdentity(
            name=self.config.author_name or '', email=self.config.author_email or ''
        )
