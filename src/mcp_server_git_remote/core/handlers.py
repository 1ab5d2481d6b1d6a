"""Tool call dispatch for MCP Git Remote Server"""

import asyncio
import logging
import os
import time
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from ..error_handling import ErrorKind, record_error_metric
from ..git.paths import InvalidPathError, normalize_path
from ..git.result import GitResult
from ..git.service import GitRemoteService, RepositoryServiceFactory
from .formatter import ToolResponse, error_response, format_response
from .tools import ToolDefinition, ToolRegistry, build_default_registry

logger = logging.getLogger(__name__)


def describe_validation_error(tool_name: str, error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one caller-readable line"""
    details = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        message = err.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.append(f"{location}: {message}")
    return f"Invalid arguments for {tool_name}: {'; '.join(details)}"


class CallToolHandler:
    """Single dispatch pipeline shared by every remote tool.

    Each call runs the same sequence, whichever tool was named:

    1. validate the arguments against the tool's schema
    2. normalize the repository path
    3. probe that the path is a repository
    4. run the tool's handler against the repository service
    5. format the result

    A failing step short-circuits the rest. Any exception escaping a step is
    turned into an error response at the outer boundary, so callers always
    get a normal payload with an error flag.

    The handler keeps no per-call state; concurrent calls share only the
    frozen registry. Calls against the same repository are not serialized.
    """

    def __init__(
        self,
        registry: Optional[ToolRegistry] = None,
        service_factory: RepositoryServiceFactory = GitRemoteService,
        operation_timeout: Optional[float] = None,
    ):
        self.registry = registry or build_default_registry()
        self.service_factory = service_factory
        self.operation_timeout = operation_timeout

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> ToolResponse:
        """Main tool call entry point"""
        request_id = os.urandom(4).hex()
        log_context = {"request_id": request_id, "tool": name}
        logger.info(f"Tool call: {name}", extra=log_context)
        logger.debug(f"Arguments: {arguments}", extra=log_context)

        start_time = time.time()
        try:
            response = await self._dispatch(name, arguments if arguments is not None else {})
        except Exception as e:
            logger.error(f"Tool '{name}' raised an unexpected error: {e}", exc_info=True, extra=log_context)
            record_error_metric(ErrorKind.INTERNAL_FAULT, name)
            response = error_response(f"Internal error while running {name}: {e}")

        duration_ms = round((time.time() - start_time) * 1000, 2)
        if response.is_error:
            logger.warning(
                f"Tool '{name}' failed: {response.text}",
                extra={**log_context, "duration_ms": duration_ms},
            )
        else:
            logger.info(
                f"Tool '{name}' completed",
                extra={**log_context, "duration_ms": duration_ms},
            )
        return response

    async def _dispatch(self, name: str, arguments: Dict[str, Any]) -> ToolResponse:
        tool_def = self.registry.get_tool(name)
        if tool_def is None:
            return self._reject(name, f"Unknown tool: {name}")

        try:
            params = tool_def.schema.model_validate(arguments)
            path = normalize_path(params.path)
        except ValidationError as e:
            return self._reject(name, describe_validation_error(name, e))
        except InvalidPathError as e:
            return self._reject(name, f"Invalid arguments for {name}: path: {e}")

        result = await self._run_bounded(tool_def, path, params)

        if not result.success:
            record_error_metric(result.error.kind, name)
        return format_response(name, path, params, result)

    def _reject(self, name: str, message: str) -> ToolResponse:
        record_error_metric(ErrorKind.VALIDATION_ERROR, name)
        return error_response(message)

    async def _run_bounded(
        self, tool_def: ToolDefinition, path: str, params: BaseModel
    ) -> GitResult:
        if self.operation_timeout is None:
            return await self._probe_and_execute(tool_def, path, params)

        try:
            return await asyncio.wait_for(
                self._probe_and_execute(tool_def, path, params),
                timeout=self.operation_timeout,
            )
        except asyncio.TimeoutError:
            return GitResult.fail(
                ErrorKind.TIMEOUT,
                f"{tool_def.name} timed out after {self.operation_timeout:g}s",
            )

    async def _probe_and_execute(
        self, tool_def: ToolDefinition, path: str, params: BaseModel
    ) -> GitResult:
        service = self.service_factory(path)

        if not await service.is_repository():
            return GitResult.fail(ErrorKind.NOT_A_REPOSITORY, f"Not a Git repository: {path}")

        result = await tool_def.handler(service, params)
        if not isinstance(result, GitResult):
            raise TypeError(
                f"{tool_def.name} handler returned {type(result).__name__}, expected GitResult"
            )
        return result
