"""Migration progress tracking."""

from .base import ProgressTracker
from .memory import MemoryProgress
from .progress import ProgressStore

__all__ = ['ProgressTracker', 'MemoryProgress', 'ProgressStore']
