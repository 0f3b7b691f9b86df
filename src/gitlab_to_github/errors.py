"""Core migration exceptions."""

from typing import Optional


class MigrationError(Exception):
    """Base exception for migration errors."""

    pass


class ConfigError(MigrationError):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str, missing: Optional[list] = None):
        """Initialize configuration error.

        Args:
            message: Error message
            missing: Names of the missing environment variables
        """
        super().__init__(message)
        self.missing = missing or []


class StoreIOError(MigrationError):
    """Progress store could not be read or atomically replaced."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class RecordNotFoundError(MigrationError):
    """No row in the progress store carries the requested slug."""

    def __init__(self, slug: str):
        super().__init__(f'No record for slug {slug!r} in progress store')
        self.slug = slug


class StepFailure(MigrationError):
    """A clone, rewrite or push stage failed for one repository."""

    def __init__(self, step: str, cause: str):
        """Initialize step failure.

        Args:
            step: Name of the step being executed
            cause: Human readable failure cause
        """
        super().__init__(f'Step {step} failed: {cause}')
        self.step = step
        self.cause = cause
