"""Commit authorship rewriting with git filter-repo."""

from dataclasses import dataclass

from loguru import logger

from .runner import GitCommandError, GitResult, GitRunner


@dataclass
class AuthorIdentity:
    """Identity written into every rewritten commit."""

    name: str
    email: str


def build_commit_callback(identity: AuthorIdentity) -> str:
    """Build a filter-repo commit callback replacing author and committer.

    Values are emitted as Python bytes literals so quotes and backslashes in
    the identity cannot break out of the callback body.
    """
    name = repr(identity.name.encode('utf-8'))
    email = repr(identity.email.encode('utf-8'))
    return (
        f'commit.author_name = {name}\n'
        f'commit.author_email = {email}\n'
        f'commit.committer_name = {name}\n'
        f'commit.committer_email = {email}\n'
    )


class HistoryRewriter:
    """Scrubs commit authorship before a repository is published."""

    def __init__(self, runner: GitRunner):
        self.runner = runner
        self.logger = logger.bind(component='HistoryRewriter')

    def rewrite_authorship(self, repo_path: str, identity: AuthorIdentity) -> GitResult:
        """Rewrite every commit's author and committer to ``identity``.

        ``--force`` lets a retried push step rewrite a repository that an
        earlier attempt already rewrote.
        """
        self.logger.info(f'Removing commit authors in {repo_path}')

        try:
            self.runner.run(
                [
                    'git',
                    'filter-repo',
                    '--force',
                    '--replace-refs',
                    'delete-no-add',
                    '--commit-callback',
                    build_commit_callback(identity),
                ],
                repo_path,
            )
        except GitCommandError as e:
            error_msg = f'History rewrite failed: {e}'
            self.logger.error(error_msg)
            return GitResult(success=False, error=error_msg)

        return GitResult(success=True)
