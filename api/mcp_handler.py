"""
MCP JSON-RPC endpoint
Handles initialize, tools/list and tools/call over HTTP POST
"""

import json
import asyncio
import logging
from typing import Any, Dict, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from tools import InvalidArgumentsError, ToolDispatcher, UnknownToolError

from .jsonrpc import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    RequestId,
    error_response,
    success_response,
)

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-06-18"
SERVER_NAME = "youtube-toolkit-server"
SERVER_VERSION = "2.0.0"


def parse_message(body: bytes) -> Any:
    """
    Decode a request body as JSON

    Raises:
        ValueError: If the body is not valid UTF-8 JSON
    """
    return json.loads(body)


class MCPHandler:
    """
    JSON-RPC 2.0 dispatcher for the MCP endpoint

    Every JSON-RPC reply is sent with HTTP 200; notifications (messages
    without an id) are acknowledged with 202 and no body.
    """

    def __init__(self, dispatcher: ToolDispatcher):
        self.dispatcher = dispatcher
        self._methods = {
            "initialize": self._initialize,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    async def handle(self, request: Request) -> Response:
        """Starlette endpoint for POST /mcp"""
        try:
            message = parse_message(await request.body())
        except ValueError:
            logger.warning("Rejected MCP request: body is not valid JSON")
            return JSONResponse(error_response(None, PARSE_ERROR, "Parse error"))

        if not isinstance(message, dict):
            return JSONResponse(error_response(None, INVALID_REQUEST, "Invalid Request"))

        request_id = message.get("id")
        if not isinstance(request_id, (str, int)) or isinstance(request_id, bool):
            request_id = None

        method = message.get("method")
        if not isinstance(method, str) or not method:
            return JSONResponse(error_response(request_id, INVALID_REQUEST, "Invalid Request"))

        if "id" not in message:
            logger.debug(f"Notification received: {method}")
            return Response(status_code=202)

        handler = self._methods.get(method)
        if handler is None:
            logger.warning(f"Unknown MCP method: {method}")
            return JSONResponse(
                error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
            )

        return JSONResponse(await handler(request_id, message.get("params")))

    async def _initialize(self, request_id: RequestId, params: Any) -> Dict[str, Any]:
        client_info = params.get("clientInfo") if isinstance(params, dict) else None
        logger.info(f"MCP session initialized by {client_info or 'unknown client'}")
        return success_response(request_id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        })

    async def _list_tools(self, request_id: RequestId, params: Any) -> Dict[str, Any]:
        tools = [
            tool.model_dump(mode='json', by_alias=True, exclude_none=True)
            for tool in self.dispatcher.list_tools()
        ]
        return success_response(request_id, {"tools": tools})

    async def _call_tool(self, request_id: RequestId, params: Any) -> Dict[str, Any]:
        if not isinstance(params, dict) or not isinstance(params.get("name"), str):
            return error_response(request_id, INVALID_PARAMS, "Invalid params: 'name' is required")

        name = params["name"]
        arguments: Optional[Any] = params.get("arguments")

        # Google client calls block; keep them off the event loop
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, self.dispatcher.call_tool, name, arguments)
        except UnknownToolError:
            logger.warning(f"Unknown tool requested: {name}")
            return error_response(request_id, METHOD_NOT_FOUND, "Unknown tool", {"name": name})
        except InvalidArgumentsError as e:
            logger.warning(f"⚠️ {e}")
            return error_response(request_id, INVALID_PARAMS, "Invalid params", e.errors)

        return success_response(request_id, result)
