"""Configuration management for the GitLab to GitHub migration tool."""

import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, validator

from ..errors import ConfigError


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class SourceConfig(BaseModel):
    """Source (GitLab) settings."""

    token: Optional[str] = Field(default=None, description='GitLab access token')
    url_pattern: str = Field(
        default=r'^https://gitlab\.',
        description='Regex a source URL must match to be migrated',
    )

    @validator('url_pattern')
    def validate_url_pattern(cls, v):
        """Validate that the pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f'Invalid source URL pattern: {e}')
        return v

    def matches(self, url: str) -> bool:
        """Check whether ``url`` belongs to the source provider."""
        return re.search(self.url_pattern, url) is not None


class DestinationConfig(BaseModel):
    """Destination (GitHub) settings."""

    token: Optional[str] = Field(default=None, description='GitHub access token')
    org: Optional[str] = Field(default=None, description='GitHub organization')
    api_url: str = Field(default='https://api.github.com', description='API URL')
    web_url: str = Field(default='https://github.com', description='Git host URL')
    private: bool = Field(default=True, description='Create private repositories')
    allow_existing: bool = Field(
        default=True,
        description='Treat an already existing destination repository as created',
    )
    timeout: int = Field(default=30, description='Request timeout in seconds')
    rate_limit_per_second: float = Field(
        default=1.0, description='API requests per second limit'
    )

    @validator('api_url', 'web_url')
    def validate_url(cls, v):
        """Validate URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @validator('rate_limit_per_second')
    def validate_rate_limit(cls, v):
        """Validate rate limit is positive."""
        if v <= 0:
            raise ValueError('Rate limit must be positive')
        return v


class StoreConfig(BaseModel):
    """Progress store settings."""

    csv_file: Optional[str] = Field(default=None, description='Progress CSV path')
    tmp_file: Optional[str] = Field(
        default=None, description='Staging file used when rewriting the CSV'
    )


class GitConfig(BaseModel):
    """Git operations configuration."""

    repos_dir: Optional[str] = Field(
        default=None, description='Directory local bare clones are kept in'
    )
    timeout: int = Field(
        default=3600, description='Git operation timeout in seconds (default: 1 hour)'
    )
    rewrite_authors: bool = Field(
        default=False, description='Replace commit authorship before pushing'
    )
    author_name: Optional[str] = Field(
        default=None, description='Author name written by the history rewrite'
    )
    author_email: Optional[str] = Field(
        default=None, description='Author email written by the history rewrite'
    )
    maintenance: bool = Field(
        default=True, description='Run fsck, gc and repack before pushing'
    )

    @validator('timeout')
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Git timeout must be positive')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(
        default=None, description='Log file path; overrides the timestamped default'
    )
    directory: str = Field(
        default='log', description='Directory timestamped run logs are written to'
    )
    to_file: bool = Field(default=True, description='Write a log file for every run')

    @validator('level')
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        # The shell tooling used WARN
        v = 'WARNING' if v.upper() == 'WARN' else v.upper()
        if v not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v

    def resolve_file(
        self, prefix: str, now: Optional[datetime] = None
    ) -> Optional[str]:
        """Return the log file for a run, or None when file logging is off.

        Args:
            prefix: Run kind, e.g. ``migration`` or ``delete_repos``
            now: Run start time used in the file name

        Returns:
            ``file`` if set, else ``<directory>/<prefix>_<YYYYmmdd_HHMMSS>.log``
        """
        if not self.to_file:
            return None
        if self.file:
            return self.file
        stamp = (now or datetime.now()).strftime('%Y%m%d_%H%M%S')
        return os.path.join(self.directory, f'{prefix}_{stamp}.log')


# (section, field, environment variable) required per command
_REQUIRED: Dict[str, List[Tuple[str, str, str]]] = {
    'migrate': [
        ('source', 'token', 'GITLAB_TOKEN'),
        ('destination', 'token', 'GITHUB_TOKEN'),
        ('destination', 'org', 'GITHUB_ORG'),
        ('store', 'csv_file', 'CSV_FILE'),
        ('git', 'repos_dir', 'REPOS_DIR'),
    ],
    'direct': [
        ('source', 'token', 'GITLAB_TOKEN'),
        ('destination', 'token', 'GITHUB_TOKEN'),
        ('destination', 'org', 'GITHUB_ORG'),
        ('git', 'repos_dir', 'REPOS_DIR'),
    ],
    'delete': [
        ('destination', 'token', 'GITHUB_TOKEN'),
        ('destination', 'org', 'GITHUB_ORG'),
        ('store', 'csv_file', 'CSV_FILE'),
    ],
    'delete-single': [
        ('destination', 'token', 'GITHUB_TOKEN'),
        ('destination', 'org', 'GITHUB_ORG'),
    ],
}
_REQUIRED['migrate-single'] = _REQUIRED['direct']

_REWRITE_REQUIRED = [
    ('git', 'author_name', 'GIT_AUTHOR_NAME'),
    ('git', 'author_email', 'GIT_AUTHOR_EMAIL'),
]


class Config(BaseModel):
    """Main configuration class for the migration tool."""

    source: SourceConfig = Field(default_factory=SourceConfig)
    destination: DestinationConfig = Field(default_factory=DestinationConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        """Pydantic configuration."""

        extra = 'forbid'  # Don't allow extra fields

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables and ``.env``."""
        load_dotenv()

        config_data = {
            'source': {
                'token': os.getenv('GITLAB_TOKEN'),
                'url_pattern': os.getenv('GITLAB_URL_PATTERN'),
            },
            'destination': {
                'token': os.getenv('GITHUB_TOKEN'),
                'org': os.getenv('GITHUB_ORG'),
                'api_url': os.getenv('GITHUB_API_URL'),
                'web_url': os.getenv('GITHUB_URL'),
                'private': _env_flag('GITHUB_PRIVATE', True),
                'allow_existing': _env_flag('GITHUB_ALLOW_EXISTING', True),
            },
            'store': {
                'csv_file': os.getenv('CSV_FILE'),
                'tmp_file': os.getenv('TMP_FILE'),
            },
            'git': {
                'repos_dir': os.getenv('REPOS_DIR'),
                'timeout': int(os.getenv('GIT_TIMEOUT', 3600)),
                'rewrite_authors': _env_flag('GIT_REWRITE_AUTHORS', False),
                'author_name': os.getenv('GIT_AUTHOR_NAME'),
                'author_email': os.getenv('GIT_AUTHOR_EMAIL'),
                'maintenance': _env_flag('GIT_MAINTENANCE', True),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', 'INFO'),
                'file': os.getenv('LOG_FILE'),
                'directory': os.getenv('LOG_DIR'),
                'to_file': _env_flag('LOG_TO_FILE', True),
            },
        }

        # Remove None and empty values
        config_data = cls._remove_none_values(config_data)

        return cls(**config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None and empty string values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None and v != ''
            }
        return data

    def missing_for(self, command: str) -> List[str]:
        """List environment variables required by ``command`` that are unset.

        Args:
            command: CLI command name

        Returns:
            Names of missing variables, in declaration order
        """
        required = list(_REQUIRED.get(command, []))
        if command in ('migrate', 'direct', 'migrate-single') and self.git.rewrite_authors:
            required.extend(_REWRITE_REQUIRED)

        missing = []
        for section, field, env_name in required:
            value = getattr(getattr(self, section), field)
            if value is None or not str(value).strip():
                missing.append(env_name)
        return missing

    def require(self, command: str) -> 'Config':
        """Ensure everything ``command`` needs is configured.

        Raises:
            ConfigError: Naming every missing variable
        """
        missing = self.missing_for(command)
        if missing:
            raise ConfigError(
                f'Missing required configuration for {command}: {", ".join(missing)}',
                missing=missing,
            )
        return self
