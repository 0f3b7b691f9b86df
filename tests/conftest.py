"""Shared fixtures for migration tests."""

import os
from pathlib import Path
from unittest.mock import Mock

import pytest

from gitlab_to_github.config.config import DestinationConfig, GitConfig, SourceConfig
from gitlab_to_github.git.clone import CloneResult
from gitlab_to_github.git.push import PushResult
from gitlab_to_github.git.rewrite import AuthorIdentity
from gitlab_to_github.git.runner import GitResult
from gitlab_to_github.store.progress import ProgressStore


@pytest.fixture
def make_store(tmp_path):
    """Write CSV content to a progress file and open a store on it."""

    def _make(content: str, name: str = 'repos.csv') -> ProgressStore:
        path = tmp_path / name
        path.write_bytes(content.encode('utf-8'))
        return ProgressStore(str(path))

    return _make


@pytest.fixture
def repos_dir(tmp_path) -> Path:
    path = tmp_path / 'repos'
    path.mkdir()
    return path


@pytest.fixture
def git_ops(repos_dir):
    """Git collaborators that succeed, creating the clone directory."""
    git = Mock()
    git.config = GitConfig(repos_dir=str(repos_dir))
    git.identity = None
    git.repository_path.side_effect = lambda slug: os.path.join(
        str(repos_dir), f'{slug}.git'
    )

    def clone(source_url, destination_path):
        os.makedirs(destination_path, exist_ok=True)
        return CloneResult(success=True, repository_path=destination_path)

    git.cloner.clone.side_effect = clone
    git.rewriter.rewrite_authorship.return_value = GitResult(success=True)
    git.maintenance.run.return_value = GitResult(success=True)
    git.pusher.push_repository.return_value = PushResult(
        success=True, primary_branch='main'
    )
    return git


@pytest.fixture
def rewrite_identity():
    return AuthorIdentity(name='Migration Bot', email='bot@example.com')


@pytest.fixture
def github():
    client = Mock()
    client.push_url.side_effect = lambda org, name, authenticated=True: (
        f'https://{"x-access-token:secret@" if authenticated else ""}'
        f'github.com/{org}/{name}.git'
    )
    return client


@pytest.fixture
def destination():
    return DestinationConfig(token='gh-token', org='acme')


@pytest.fixture
def source():
    return SourceConfig(token='gl-token')
