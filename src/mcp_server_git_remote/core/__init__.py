"""MCP Git Remote Server core components"""

from .formatter import ToolResponse, format_response
from .handlers import CallToolHandler
from .tools import GitTools, ToolDefinition, ToolRegistry, build_default_registry

__all__ = [
    "CallToolHandler",
    "GitTools",
    "ToolDefinition",
    "ToolRegistry",
    "ToolResponse",
    "build_default_registry",
    "format_response",
]
