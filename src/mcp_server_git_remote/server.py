"""
MCP Git Remote Server - stdio server exposing git remote operations as tools.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from .config import ServerConfig
from .core.handlers import CallToolHandler
from .git.paths import InvalidPathError, normalize_path
from .git.service import GitRemoteService

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-git-remote"


def create_server(handler: CallToolHandler) -> Server:
    """Build the MCP server with tool listing and dispatch wired to ``handler``"""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return handler.registry.list_tools()

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> CallToolResult:
        response = await handler.call_tool(name, arguments)
        return response.to_call_tool_result()

    return server


async def serve(
    repository: Optional[Path],
    config: Optional[ServerConfig] = None,
    test_mode: bool = False,
) -> None:
    """
    Run the MCP Git Remote Server over stdio.

    Args:
        repository: Optional repository the server is started for; it is
            checked once at startup, tool calls still name their own path
        config: Server configuration (read from the environment if omitted)
        test_mode: Stay alive briefly without a stdio connection, for CI
    """
    config = config or ServerConfig.from_env()

    logger.info("🚀 Starting MCP Git Remote Server")
    logger.info(f"Repository: {repository or '.'}")

    if repository is not None:
        try:
            repo_path = normalize_path(str(repository))
        except InvalidPathError as e:
            logger.error(f"Invalid repository path {repository!r}: {e}")
            return
        if not await GitRemoteService(repo_path).is_repository():
            logger.error(f"{repo_path} is not a valid Git repository")
            return
        logger.info(f"✅ Using repository at {repo_path}")

    handler = CallToolHandler(operation_timeout=config.operation_timeout_seconds)
    server = create_server(handler)

    if test_mode:
        logger.info("🧪 Running in test mode - staying alive for CI testing")
        await asyncio.sleep(10)
        logger.info("🧪 Test mode completed successfully")
        return

    try:
        options = server.create_initialization_options()
        logger.info("Initializing stdio server connection...")

        async with stdio_server() as (read_stream, write_stream):
            logger.info("Server running. Waiting for requests...")
            await server.run(read_stream, write_stream, options, raise_exceptions=True)

    except Exception as e:
        logger.exception(f"Critical Error: Server stopped due to unhandled exception: {e}")
        sys.exit(1)
    finally:
        logger.info("MCP Git Remote Server shutting down.")

