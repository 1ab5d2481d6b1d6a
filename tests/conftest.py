"""
Global pytest configuration and fixtures.

This file provides:
1. Temporary git repositories and bare "remote" repositories
2. A spy RepositoryService for dispatcher tests
3. Automatic marking of tests based on their location
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock

import git
import pytest

from mcp_server_git_remote.core.handlers import CallToolHandler
from mcp_server_git_remote.error_handling import reset_error_stats
from mcp_server_git_remote.git.result import GitResult


class GitRepositoryFactory:
    """Factory for creating test git repositories."""

    @staticmethod
    def configure_identity(repo: git.Repo) -> git.Repo:
        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")
        return repo

    @staticmethod
    def commit_file(repo: git.Repo, name: str, content: str, message: str) -> str:
        file_path = Path(repo.working_dir) / name
        file_path.write_text(content)
        repo.index.add([name])
        return repo.index.commit(message).hexsha

    @staticmethod
    def create_clean_repo(path: Path) -> git.Repo:
        """Create a git repository on master with an initial commit."""
        path.mkdir(parents=True, exist_ok=True)
        repo = git.Repo.init(path, initial_branch="master")
        GitRepositoryFactory.configure_identity(repo)
        GitRepositoryFactory.commit_file(repo, "README.md", "# Test Repository", "Initial commit")
        return repo

    @staticmethod
    def create_bare_remote(path: Path) -> git.Repo:
        """Create an empty bare repository to act as a remote."""
        path.mkdir(parents=True, exist_ok=True)
        return git.Repo.init(path, bare=True, initial_branch="master")

    @staticmethod
    def clone(source: Path, path: Path) -> git.Repo:
        """Clone a repository; the clone tracks origin/master."""
        repo = git.Repo.clone_from(str(source), str(path))
        return GitRepositoryFactory.configure_identity(repo)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def git_repo_factory():
    """Provide access to GitRepositoryFactory."""
    return GitRepositoryFactory


@pytest.fixture
def clean_git_repo(temp_dir: Path) -> git.Repo:
    """A repository with one commit and no remotes."""
    return GitRepositoryFactory.create_clean_repo(temp_dir / "clean_repo")


@pytest.fixture
def bare_remote(temp_dir: Path) -> git.Repo:
    """An empty bare repository usable as a remote."""
    return GitRepositoryFactory.create_bare_remote(temp_dir / "remote.git")


@pytest.fixture
def tracked_repo(clean_git_repo: git.Repo, bare_remote: git.Repo) -> git.Repo:
    """A repository whose master tracks origin/master on ``bare_remote``."""
    clean_git_repo.create_remote("origin", bare_remote.working_dir)
    clean_git_repo.git.push("--set-upstream", "origin", "master")
    return clean_git_repo


@pytest.fixture
def other_clone(tracked_repo: git.Repo, bare_remote: git.Repo, temp_dir: Path) -> git.Repo:
    """A second working copy of ``bare_remote``, used to move the remote ahead."""
    return GitRepositoryFactory.clone(Path(bare_remote.working_dir), temp_dir / "other_clone")


@pytest.fixture
def spy_service() -> AsyncMock:
    """A repository service double that records calls and reports success."""
    service = AsyncMock()
    service.is_repository.return_value = True
    service.add_remote.return_value = GitResult.ok()
    service.list_remotes.return_value = GitResult.ok([])
    service.fetch.return_value = GitResult.ok()
    service.pull.return_value = GitResult.ok()
    service.push.return_value = GitResult.ok()
    return service


@pytest.fixture
def spy_handler(spy_service: AsyncMock) -> CallToolHandler:
    """A dispatcher whose service factory always hands out ``spy_service``."""
    return CallToolHandler(service_factory=lambda path: spy_service)


@pytest.fixture(autouse=True)
def clean_error_stats():
    reset_error_stats()
    yield
    reset_error_stats()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "requires_git: Tests that run the git binary")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location and fixtures."""
    git_fixtures = {"clean_git_repo", "bare_remote", "tracked_repo", "other_clone"}
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        if git_fixtures.intersection(item.fixturenames):
            item.add_marker(pytest.mark.requires_git)
            item.add_marker(pytest.mark.integration)
