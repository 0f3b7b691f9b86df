"""Git operations module for repository migration."""

from .clone import CloneResult, GitCloner
from .maintenance import GitMaintenance
from .operations import GitOperations
from .push import GitPusher, PushResult
from .rewrite import AuthorIdentity, HistoryRewriter
from .runner import GitCommandError, GitResult, GitRunner

__all__ = [
    'AuthorIdentity',
    'CloneResult',
    'GitCloner',
    'GitCommandError',
    'GitMaintenance',
    'GitOperations',
    'GitPusher',
    'GitResult',
    'GitRunner',
    'HistoryRewriter',
    'PushResult',
]
