"""Render operation results into caller-facing tool responses"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from mcp.types import CallToolResult, TextContent

from ..git.models import GitFetch, GitPull, GitPush, GitRemoteAdd, RemoteInfo
from ..git.result import GitResult
from .tools import GitTools


@dataclass
class ToolResponse:
    """Text payload plus error flag returned for every tool call"""

    texts: List[str] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.texts)

    def to_call_tool_result(self) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=text) for text in self.texts],
            isError=self.is_error,
        )


def error_response(message: str) -> ToolResponse:
    return ToolResponse(texts=[f"Error: {message}"], is_error=True)


def _render_remote_add(path: str, params: GitRemoteAdd, data: Any) -> str:
    return f"Successfully added remote '{params.name}' with URL '{params.url}'"


def _render_remote_list(path: str, params: Any, data: List[RemoteInfo]) -> str:
    if not data:
        return f"No remotes found in repository at: {path}"

    lines = [f"Remotes in repository at: {path}", ""]
    for remote in data:
        lines.append(remote.name)
        lines.append(f"  fetch: {remote.fetch_url or '(none)'}")
        lines.append(f"  push: {remote.push_url or '(none)'}")
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def _render_fetch(path: str, params: GitFetch, data: Any) -> str:
    text = f"Successfully fetched from remote '{params.remote}'"
    if params.branch:
        text += f" branch '{params.branch}'"
    return text


def _render_pull(path: str, params: GitPull, data: Any) -> str:
    text = "Successfully pulled changes"
    if params.remote:
        text += f" from remote '{params.remote}'"
    elif not params.branch:
        text += " from upstream tracking branch"
    if params.branch:
        text += f" branch '{params.branch}'"
    if params.rebase:
        text += " with rebase"
    return text


def _render_push(path: str, params: GitPush, data: Any) -> str:
    text = f"Successfully pushed changes to remote '{params.remote}'"
    if params.branch:
        text += f" branch '{params.branch}'"
    if params.force:
        text += " (force push)"
    if params.set_upstream:
        text += " (set upstream)"
    return text


_SUCCESS_RENDERERS: Dict[str, Callable[[str, Any, Any], str]] = {
    GitTools.REMOTE_ADD.value: _render_remote_add,
    GitTools.REMOTE_LIST.value: _render_remote_list,
    GitTools.FETCH.value: _render_fetch,
    GitTools.PULL.value: _render_pull,
    GitTools.PUSH.value: _render_push,
}


def format_response(
    tool_name: str, path: str, params: Optional[Any], result: GitResult
) -> ToolResponse:
    """Convert a GitResult into the payload returned to the MCP caller.

    Success texts echo the effective parameters, defaults included. Failures
    carry the error message and the error flag. No I/O is performed.
    """
    if not result.success:
        return error_response(result.error.message)

    return ToolResponse(texts=[_SUCCESS_RENDERERS[tool_name](path, params, result.data)])
