"""GitHub API exceptions, one per HTTP failure the migration reacts to."""

from typing import Any, Optional


class GitHubAPIError(Exception):
    """A GitHub request failed or could not be sent.

    ``status_code`` is None for network errors.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class GitHubAuthenticationError(GitHubAPIError):
    """Missing token or HTTP 401."""


class GitHubRateLimitError(GitHubAPIError):
    """HTTP 429, or 403 with an exhausted quota."""

    def __init__(self, message: str, retry_after: int = 60, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class GitHubNotFoundError(GitHubAPIError):
    """HTTP 404; also returned for repositories the token cannot see."""


class GitHubValidationError(GitHubAPIError):
    """HTTP 422."""


class GitHubRepositoryExistsError(GitHubValidationError):
    """Repository creation rejected because the name is taken."""
