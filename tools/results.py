"""
Tool call results
"""

import json
from typing import Any

from mcp.types import CallToolResult, TextContent


def tool_result(payload: Any) -> CallToolResult:
    """Wrap an API response as a successful tool result (pretty-printed JSON text)"""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(payload, indent=2))],
        isError=False,
    )


def tool_error(message: str) -> CallToolResult:
    """Build a tool-level failure the client can show to the model"""
    return CallToolResult(
        content=[TextContent(type="text", text=message)],
        isError=True,
    )
