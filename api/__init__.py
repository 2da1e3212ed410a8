"""
HTTP API for the YouTube Toolkit MCP Server
"""

from .mcp_handler import MCPHandler, PROTOCOL_VERSION
from .oauth_handler import OAuthHandler

__all__ = [
    'MCPHandler',
    'OAuthHandler',
    'PROTOCOL_VERSION',
]
