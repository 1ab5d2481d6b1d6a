"""Repository service: the contract the tool layer depends on, and its GitPython implementation"""

import asyncio
import logging
from typing import Callable, List, Optional, Protocol

from git import GitCommandError, Repo
from git.exc import (
    GitError,
    InvalidGitRepositoryError,
    NoSuchPathError,
    UnsafeProtocolError,
)
from git.refs.remote import RemoteReference

from ..error_handling import ErrorKind, classify_git_error, describe_git_error
from .models import DEFAULT_REMOTE, RemoteInfo
from .result import GitResult

logger = logging.getLogger(__name__)

# Credentials are out of scope; git must fail instead of prompting on the
# stdio transport.
_NON_INTERACTIVE_ENV = {"GIT_TERMINAL_PROMPT": "0"}


class RepositoryService(Protocol):
    """Remote operations on one repository.

    Implementations are bound to a single normalized repository path. Every
    operation reports its outcome as a GitResult; only ``is_repository``
    returns a plain bool and it never raises.

    Concurrent mutating calls against the same path are not serialized here;
    callers that need ordering must provide it.
    """

    async def is_repository(self) -> bool:
        ...

    async def add_remote(self, name: str, url: str) -> GitResult[None]:
        ...

    async def list_remotes(self) -> GitResult[List[RemoteInfo]]:
        ...

    async def fetch(
        self, remote: str = DEFAULT_REMOTE, branch: Optional[str] = None
    ) -> GitResult[None]:
        ...

    async def pull(
        self,
        remote: Optional[str] = None,
        branch: Optional[str] = None,
        rebase: bool = False,
    ) -> GitResult[None]:
        ...

    async def push(
        self,
        remote: str = DEFAULT_REMOTE,
        branch: Optional[str] = None,
        force: bool = False,
        set_upstream: bool = False,
    ) -> GitResult[None]:
        ...


RepositoryServiceFactory = Callable[[str], RepositoryService]


class GitRemoteService:
    """RepositoryService backed by GitPython.

    GitPython is blocking, so each operation runs in a worker thread and the
    coroutine suspends until git finishes.
    """

    def __init__(self, repo_path: str):
        self.repo_path = repo_path

    def _open_repo(self) -> Repo:
        return Repo(self.repo_path, search_parent_directories=True)

    async def is_repository(self) -> bool:
        try:
            return await asyncio.to_thread(self._probe)
        except Exception as e:
            logger.warning(f"Repository probe failed for {self.repo_path}: {e}")
            return False

    def _probe(self) -> bool:
        try:
            with self._open_repo():
                return True
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False
        except OSError as e:
            logger.debug(f"Cannot access {self.repo_path}: {e}")
            return False

    async def add_remote(self, name: str, url: str) -> GitResult[None]:
        return await self._run("Add remote", self._add_remote, name, url)

    async def list_remotes(self) -> GitResult[List[RemoteInfo]]:
        return await self._run("List remotes", self._list_remotes)

    async def fetch(
        self, remote: str = DEFAULT_REMOTE, branch: Optional[str] = None
    ) -> GitResult[None]:
        return await self._run("Fetch", self._fetch, remote, branch)

    async def pull(
        self,
        remote: Optional[str] = None,
        branch: Optional[str] = None,
        rebase: bool = False,
    ) -> GitResult[None]:
        return await self._run("Pull", self._pull, remote, branch, rebase)

    async def push(
        self,
        remote: str = DEFAULT_REMOTE,
        branch: Optional[str] = None,
        force: bool = False,
        set_upstream: bool = False,
    ) -> GitResult[None]:
        return await self._run("Push", self._push, remote, branch, force, set_upstream)

    async def _run(self, operation: str, func: Callable, *args) -> GitResult:
        try:
            return await asyncio.to_thread(self._with_repo, func, *args)
        except GitCommandError as e:
            kind = classify_git_error(e)
            message = describe_git_error(e)
            logger.warning(
                f"{operation} failed in {self.repo_path}: {message}",
                extra={"error_kind": kind.value},
            )
            return GitResult.fail(kind, f"{operation} failed: {message}")
        except UnsafeProtocolError as e:
            return GitResult.fail(ErrorKind.INVALID_URL, f"{operation} failed: {e}")
        except (GitError, OSError) as e:
            logger.warning(f"{operation} error in {self.repo_path}: {e}")
            return GitResult.fail(ErrorKind.IO_FAILURE, f"{operation} error: {e}")

    def _with_repo(self, func: Callable, *args) -> GitResult:
        with self._open_repo() as repo:
            return func(repo, *args)

    def _add_remote(self, repo: Repo, name: str, url: str) -> GitResult[None]:
        if name in self._remote_names(repo):
            return GitResult.fail(
                ErrorKind.REMOTE_EXISTS, f"Remote '{name}' already exists"
            )

        repo.create_remote(name, url)
        logger.info(f"Added remote '{name}' ({url}) to {self.repo_path}")
        return GitResult.ok()

    def _list_remotes(self, repo: Repo) -> GitResult[List[RemoteInfo]]:
        remotes = []
        # repo.remotes follows the order of the [remote] sections in .git/config
        for name in self._remote_names(repo):
            fetch_url = self._remote_url(repo, name)
            push_url = self._remote_url(repo, name, "--push") or fetch_url
            remotes.append(RemoteInfo(name=name, fetch_url=fetch_url, push_url=push_url))
        return GitResult.ok(remotes)

    def _remote_url(self, repo: Repo, name: str, *flags: str) -> str:
        # A [remote] section without a url must not hide the other remotes
        try:
            return repo.git.remote("get-url", *flags, name)
        except GitCommandError as e:
            logger.debug(f"No URL for remote '{name}' in {self.repo_path}: {describe_git_error(e)}")
            return ""

    def _fetch(self, repo: Repo, remote: str, branch: Optional[str]) -> GitResult[None]:
        missing = self._require_remote(repo, remote)
        if missing:
            return missing

        fetch_args = [remote]
        if branch:
            fetch_args.append(branch)

        with repo.git.custom_environment(**_NON_INTERACTIVE_ENV):
            repo.git.fetch(*fetch_args)
        return GitResult.ok()

    def _pull(
        self,
        repo: Repo,
        remote: Optional[str],
        branch: Optional[str],
        rebase: bool,
    ) -> GitResult[None]:
        # Pass the mode explicitly; newer git refuses divergent pulls otherwise
        pull_args = ["--rebase" if rebase else "--no-rebase"]

        if remote is None:
            tracking = self._tracking_branch(repo)
            if branch is None:
                if tracking is None:
                    return GitResult.fail(
                        ErrorKind.NO_UPSTREAM,
                        "No upstream branch is configured for the current branch "
                        "and no remote was specified",
                    )
            else:
                remote = tracking.remote_name if tracking is not None else DEFAULT_REMOTE

        if remote is not None:
            missing = self._require_remote(repo, remote)
            if missing:
                return missing
            pull_args.append(remote)
            if branch:
                pull_args.append(branch)

        with repo.git.custom_environment(**_NON_INTERACTIVE_ENV):
            repo.git.pull(*pull_args)
        return GitResult.ok()

    def _push(
        self,
        repo: Repo,
        remote: str,
        branch: Optional[str],
        force: bool,
        set_upstream: bool,
    ) -> GitResult[None]:
        missing = self._require_remote(repo, remote)
        if missing:
            return missing

        if not branch:
            try:
                branch = repo.active_branch.name
            except TypeError:  # Detached HEAD
                return GitResult.fail(
                    ErrorKind.IO_FAILURE,
                    "No active branch found and no branch specified",
                )

        push_args = []
        if force:
            push_args.append("--force")
        if set_upstream:
            push_args.append("--set-upstream")
        push_args.extend([remote, branch])

        with repo.git.custom_environment(**_NON_INTERACTIVE_ENV):
            repo.git.push(*push_args)
        return GitResult.ok()

    @staticmethod
    def _remote_names(repo: Repo) -> List[str]:
        return [remote.name for remote in repo.remotes]

    def _require_remote(self, repo: Repo, remote: str) -> Optional[GitResult[None]]:
        if remote in self._remote_names(repo):
            return None
        return GitResult.fail(
            ErrorKind.UNKNOWN_REMOTE, f"Remote '{remote}' does not exist"
        )

    @staticmethod
    def _tracking_branch(repo: Repo) -> Optional[RemoteReference]:
        try:
            return repo.active_branch.tracking_branch()
        except TypeError:  # Detached HEAD
            return None
