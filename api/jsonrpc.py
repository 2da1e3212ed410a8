"""
JSON-RPC 2.0 envelope helpers for the MCP endpoint
"""

from typing import Any, Dict, Optional, Union

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    ErrorData,
)
from pydantic import BaseModel

JSONRPC_VERSION = "2.0"

RequestId = Optional[Union[str, int]]

__all__ = [
    'PARSE_ERROR',
    'INVALID_REQUEST',
    'METHOD_NOT_FOUND',
    'INVALID_PARAMS',
    'INTERNAL_ERROR',
    'success_response',
    'error_response',
    'dump',
]


def dump(value: Any) -> Any:
    """Serialize mcp.types models for the wire (camelCase aliases, no nulls)"""
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json', by_alias=True, exclude_none=True)
    return value


def success_response(request_id: RequestId, result: Any) -> Dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "result": dump(result),
    }


def error_response(
    request_id: RequestId,
    code: int,
    message: str,
    data: Any = None
) -> Dict[str, Any]:
    """
    Build a JSON-RPC error response

    Args:
        request_id: Id of the failed request (None when it could not be read)
        code: JSON-RPC error code
        message: Short error description
        data: Optional structured details

    Returns:
        Response envelope
    """
    error = ErrorData(code=code, message=message, data=data)
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": dump(error),
    }
