"""Configuration loading."""

from .config import (
    Config,
    DestinationConfig,
    GitConfig,
    LoggingConfig,
    SourceConfig,
    StoreConfig,
)

__all__ = [
    'Config',
    'DestinationConfig',
    'GitConfig',
    'LoggingConfig',
    'SourceConfig',
    'StoreConfig',
]
