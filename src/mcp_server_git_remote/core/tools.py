"""Tool registry for MCP Git Remote Server"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type

from mcp.types import Tool
from pydantic import BaseModel

from ..git.models import GitFetch, GitPull, GitPush, GitRemoteAdd, GitRemoteList
from ..git.result import GitResult
from ..git.service import RepositoryService

logger = logging.getLogger(__name__)

ToolHandler = Callable[[RepositoryService, Any], Awaitable[GitResult]]


class GitTools(str, Enum):
    """Enumeration of all available remote tools"""

    REMOTE_ADD = "git_remote_add"
    REMOTE_LIST = "git_remote_list"
    FETCH = "git_fetch"
    PULL = "git_pull"
    PUSH = "git_push"


@dataclass(frozen=True)
class ToolDefinition:
    """Complete tool definition with metadata"""

    name: str
    description: str
    schema: Type[BaseModel]
    handler: ToolHandler


class ToolRegistry:
    """Central registry for all MCP Git Remote Server tools.

    Tools are registered while the server starts; once :meth:`freeze` has been
    called the registry is read-only and may be shared by concurrent calls.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}
        self._frozen = False

    @property
    def tools(self) -> Mapping[str, ToolDefinition]:
        return MappingProxyType(self._tools)

    def register(self, tool_def: ToolDefinition):
        """Register a tool in the registry"""
        if self._frozen:
            raise RuntimeError(f"Cannot register {tool_def.name}: tool registry is frozen")
        if tool_def.name in self._tools:
            raise ValueError(f"Tool already registered: {tool_def.name}")
        self._tools[tool_def.name] = tool_def
        logger.debug(f"Registered tool: {tool_def.name}")

    def freeze(self) -> "ToolRegistry":
        self._frozen = True
        return self

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get tool definition by name"""
        return self._tools.get(name)

    def list_tools(self) -> List[Tool]:
        """Get all tools as MCP Tool objects"""
        return [
            Tool(
                name=tool_def.name,
                description=tool_def.description,
                inputSchema=tool_def.schema.model_json_schema(),
            )
            for tool_def in self._tools.values()
        ]


async def _remote_add(service: RepositoryService, params: GitRemoteAdd) -> GitResult:
    return await service.add_remote(params.name, params.url)


async def _remote_list(service: RepositoryService, params: GitRemoteList) -> GitResult:
    return await service.list_remotes()


async def _fetch(service: RepositoryService, params: GitFetch) -> GitResult:
    return await service.fetch(remote=params.remote, branch=params.branch)


async def _pull(service: RepositoryService, params: GitPull) -> GitResult:
    return await service.pull(
        remote=params.remote, branch=params.branch, rebase=params.rebase
    )


async def _push(service: RepositoryService, params: GitPush) -> GitResult:
    return await service.push(
        remote=params.remote,
        branch=params.branch,
        force=params.force,
        set_upstream=params.set_upstream,
    )


DEFAULT_TOOLS = (
    ToolDefinition(
        name=GitTools.REMOTE_ADD.value,
        description=(
            "Add a new remote repository reference. Creates a connection to a "
            "remote repository with a name and URL, allowing fetching and pushing "
            "changes to and from that repository."
        ),
        schema=GitRemoteAdd,
        handler=_remote_add,
    ),
    ToolDefinition(
        name=GitTools.REMOTE_LIST.value,
        description=(
            "List all configured remote repositories. Displays the names and URLs "
            "of all remotes associated with the repository, showing both fetch and "
            "push URLs."
        ),
        schema=GitRemoteList,
        handler=_remote_list,
    ),
    ToolDefinition(
        name=GitTools.FETCH.value,
        description=(
            "Fetch changes from a remote repository. Downloads objects and refs "
            "from a remote repository without merging them into local branches."
        ),
        schema=GitFetch,
        handler=_fetch,
    ),
    ToolDefinition(
        name=GitTools.PULL.value,
        description=(
            "Pull changes from a remote repository. Fetches from a remote "
            "repository and integrates changes into the current branch, either by "
            "merging or rebasing."
        ),
        schema=GitPull,
        handler=_pull,
    ),
    ToolDefinition(
        name=GitTools.PUSH.value,
        description=(
            "Push local changes to a remote repository. Uploads local branch "
            "commits to the remote repository, updating remote references. A "
            "non-fast-forward rejection means the remote has diverged; do not "
            "retry without pulling first or passing force."
        ),
        schema=GitPush,
        handler=_push,
    ),
)


def build_default_registry() -> ToolRegistry:
    """Create a frozen registry holding the five remote tools"""
    registry = ToolRegistry()
    for tool_def in DEFAULT_TOOLS:
        registry.register(tool_def)
    logger.info(f"Initialized tool registry with {len(registry.tools)} tools")
    return registry.freeze()
