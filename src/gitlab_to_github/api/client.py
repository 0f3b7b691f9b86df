"""GitHub API client implementation."""

from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests
from loguru import logger
from pydantic import BaseModel

from ..config.config import DestinationConfig
from .exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRepositoryExistsError,
    GitHubValidationError,
)
from .rate_limiter import RateLimiter

API_VERSION = '2022-11-28'


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


def _error_messages(error_data: Any) -> str:
    """Flatten GitHub's ``message`` and ``errors[].message`` into one string."""
    if not isinstance(error_data, dict):
        return ''

    parts = []
    if error_data.get('message'):
        parts.append(str(error_data['message']))
    for error in error_data.get('errors') or []:
        if isinstance(error, dict) and error.get('message'):
            parts.append(str(error['message']))
        elif isinstance(error, str):
            parts.append(error)
    return '; '.join(parts)


class GitHubClient:
    """GitHub REST API client with token authentication."""

    def __init__(self, config: DestinationConfig):
        """Initialize GitHub client.

        Args:
            config: Destination configuration
        """
        if not config.token:
            raise GitHubAuthenticationError('No authentication token provided')

        self.config = config
        self.base_url = config.api_url.rstrip('/')
        self.rate_limiter = RateLimiter(config.rate_limit_per_second)
        self.session = requests.Session()
        self.session.headers.update(
            {
                'Authorization': f'Bearer {config.token}',
                'Accept': 'application/vnd.github+json',
                'X-GitHub-Api-Version': API_VERSION,
                'User-Agent': 'gitlab-to-github/0.1.0',
            }
        )
        self.logger = logger.bind(component='GitHubClient')

        self.logger.debug(f'Initialized GitHub client for {self.base_url}')

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(self, response: requests.Response) -> APIResponse:
        """Handle API response and convert to standard format.

        Args:
            response: Raw HTTP response

        Returns:
            Standardized API response

        Raises:
            GitHubAPIError: For various API errors
        """
        headers = dict(response.headers)
        status = response.status_code

        if status < 400:
            try:
                data = response.json() if response.content else None
            except ValueError:
                data = response.text

            return APIResponse(
                status_code=status,
                data=data,
                headers=headers,
                success=200 <= status < 300,
            )

        try:
            error_data = response.json()
        except ValueError:
            error_data = None
        message = _error_messages(error_data) or f'HTTP {status}: {response.text}'

        if status == 429 or (
            status == 403 and headers.get('X-RateLimit-Remaining') == '0'
        ):
            retry_after = int(headers.get('Retry-After', 60))
            raise GitHubRateLimitError(
                f'Rate limit exceeded. Retry after {retry_after} seconds',
                retry_after=retry_after,
                status_code=status,
                response_data=error_data,
            )

        if status == 401:
            raise GitHubAuthenticationError(
                'Authentication failed', status_code=status, response_data=error_data
            )

        if status == 404:
            raise GitHubNotFoundError(
                'Resource not found', status_code=status, response_data=error_data
            )

        if status == 422:
            if 'already exists' in message.lower():
                raise GitHubRepositoryExistsError(
                    message, status_code=status, response_data=error_data
                )
            raise GitHubValidationError(
                f'Validation failed: {message}',
                status_code=status,
                response_data=error_data,
            )

        raise GitHubAPIError(
            f'API request failed: {message}',
            status_code=status,
            response_data=error_data,
        )

    def _request(self, method: str, endpoint: str, **kwargs) -> APIResponse:
        url = self._build_url(endpoint)
        self.rate_limiter.acquire()

        try:
            response = self.session.request(
                method, url, timeout=self.config.timeout, **kwargs
            )
        except requests.RequestException as e:
            self.logger.error(f'Network error during {method} request: {e}')
            raise GitHubAPIError(f'Network error: {e}')

        return self._handle_response(response)

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make GET request."""
        return self._request('GET', endpoint, params=params, **kwargs)

    def post(
        self, endpoint: str, data: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make POST request with a JSON body."""
        return self._request('POST', endpoint, json=data, **kwargs)

    def delete(self, endpoint: str, **kwargs) -> APIResponse:
        """Make DELETE request."""
        return self._request('DELETE', endpoint, **kwargs)

    def create_repository(
        self, org: str, name: str, private: Optional[bool] = None
    ) -> APIResponse:
        """Create a repository in an organization.

        Args:
            org: Organization login
            name: Repository name
            private: Visibility; defaults to the configured visibility

        Returns:
            API response with the created repository

        Raises:
            GitHubRepositoryExistsError: If the name is already taken
            GitHubAPIError: For any other failure
        """
        if private is None:
            private = self.config.private

        self.logger.info(
            f'Creating {"private" if private else "public"} repository {org}/{name}'
        )
        return self.post(f'/orgs/{org}/repos', data={'name': name, 'private': private})

    def delete_repository(self, org: str, name: str) -> APIResponse:
        """Delete ``org/name``.

        Raises:
            GitHubNotFoundError: If the repository does not exist
        """
        self.logger.info(f'Deleting repository {org}/{name}')
        return self.delete(f'/repos/{org}/{name}')

    def push_url(self, org: str, name: str, authenticated: bool = True) -> str:
        """Build the git remote URL for ``org/name``.

        Args:
            org: Organization login
            name: Repository name
            authenticated: Embed the access token in the URL

        Returns:
            HTTPS remote URL
        """
        web_url = self.config.web_url
        if authenticated:
            scheme, _, host = web_url.partition('://')
            web_url = f'{scheme}://x-access-token:{self.config.token}@{host}'
        return f'{web_url}/{org}/{name}.git'

    def test_connection(self) -> bool:
        """Test connection to GitHub.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            return self.get('/user').success
        except GitHubAPIError as e:
            self.logger.error(f'Connection test failed: {e}')
            return False

    def close(self):
        """Close the client session."""
        self.session.close()
        self.logger.debug('GitHub client session closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class GitHubClientFactory:
    """Factory for creating GitHub API clients."""

    @staticmethod
    def create_client(config: DestinationConfig) -> GitHubClient:
        """Create GitHub client from configuration.

        Raises:
            GitHubAuthenticationError: If no token is configured
        """
        if not config.token:
            raise GitHubAuthenticationError('GitHub token must be provided')

        return GitHubClient(config)
