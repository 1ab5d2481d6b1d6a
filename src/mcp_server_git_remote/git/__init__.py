"""Git remote operations for MCP Git Remote Server"""

from .models import (
    DEFAULT_REMOTE,
    GitFetch,
    GitPull,
    GitPush,
    GitRemoteAdd,
    GitRemoteList,
    RemoteInfo,
)
from .paths import InvalidPathError, normalize_path
from .result import GitError, GitResult
from .service import GitRemoteService, RepositoryService, RepositoryServiceFactory

__all__ = [
    # Input schemas
    "DEFAULT_REMOTE",
    "GitRemoteAdd",
    "GitRemoteList",
    "GitFetch",
    "GitPull",
    "GitPush",
    "RemoteInfo",
    # Path validation
    "InvalidPathError",
    "normalize_path",
    # Result envelope
    "GitError",
    "GitResult",
    # Repository service
    "RepositoryService",
    "RepositoryServiceFactory",
    "GitRemoteService",
]
