"""GitLab to GitHub Migration Tool

Resumable migration of repositories from GitLab to a GitHub organization,
tracking per-repository progress (clone, push) in a CSV progress file.
"""

__version__ = '0.1.0'

from .cli import main

__all__ = ['main']
