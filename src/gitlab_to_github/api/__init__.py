"""GitHub API access."""

from .client import APIResponse, GitHubClient, GitHubClientFactory
from .exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRepositoryExistsError,
    GitHubValidationError,
)

__all__ = [
    'APIResponse',
    'GitHubClient',
    'GitHubClientFactory',
    'GitHubAPIError',
    'GitHubAuthenticationError',
    'GitHubNotFoundError',
    'GitHubRateLimitError',
    'GitHubRepositoryExistsError',
    'GitHubValidationError',
]
