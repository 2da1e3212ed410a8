"""
MCP tools for the YouTube Data API
"""

from .arguments import InvalidArgumentsError, decode_arguments
from .catalog import TOOLS, list_tools
from .dispatcher import ToolDispatcher, UnknownToolError
from .results import tool_error, tool_result

__all__ = [
    'ToolDispatcher',
    'UnknownToolError',
    'InvalidArgumentsError',
    'decode_arguments',
    'TOOLS',
    'list_tools',
    'tool_result',
    'tool_error',
]
