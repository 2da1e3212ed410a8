"""
Tool Dispatcher
Routes tools/call requests to YouTube API operations
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import google.auth.exceptions
import httplib2
from googleapiclient.errors import HttpError
from mcp.types import CallToolResult, Tool

from auth import NotAuthenticatedError
from youtube_client import YouTubeClient

from .arguments import (
    AddVideoToPlaylistArguments,
    GetVideoCommentsArguments,
    GetVideoMetadataArguments,
    ReplyToCommentArguments,
    SearchVideosArguments,
    decode_arguments,
)
from .catalog import list_tools
from .results import tool_error, tool_result

logger = logging.getLogger(__name__)


class UnknownToolError(Exception):
    """tools/call named a tool that is not in the catalog"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolDispatcher:
    """
    Executes MCP tool calls against the YouTube Data API

    Each call decodes its arguments, acquires an authenticated client and
    issues exactly one API request. Failures that the model can act on
    (missing arguments, expired session, provider errors) come back as
    tool-result errors; malformed calls raise for the protocol layer.
    """

    def __init__(self, youtube_client: YouTubeClient):
        self.youtube = youtube_client
        self._handlers: Dict[str, Callable[[Any], Dict[str, Any]]] = {
            'search_videos': self._search_videos,
            'get_video_metadata': self._get_video_metadata,
            'get_video_comments': self._get_video_comments,
            'reply_to_comment': self._reply_to_comment,
            'add_video_to_playlist': self._add_video_to_playlist,
        }

    def list_tools(self) -> List[Tool]:
        return list_tools()

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> CallToolResult:
        """
        Execute a tool

        Args:
            name: Tool name from the catalog
            arguments: Raw arguments object from the request

        Returns:
            Tool result; ``isError`` is set for tool-level failures

        Raises:
            UnknownToolError: If no tool has this name
            InvalidArgumentsError: If an argument has the wrong type or value
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownToolError(name)

        args = decode_arguments(name, arguments)

        missing = args.missing_required()
        if missing:
            return tool_error(f"{missing[0]} is required")

        try:
            response = handler(args)
        except NotAuthenticatedError as e:
            logger.warning(f"⚠️ {name} called without a usable Google session")
            return tool_error(str(e))
        except HttpError as e:
            logger.error(f"❌ YouTube API error in {name}: {e.status_code} {e.reason}")
            return tool_error(f"API Error ({e.status_code}): {e.reason}")
        except google.auth.exceptions.RefreshError as e:
            # Token revoked between acquisition and the API call
            logger.warning(f"⚠️ Google rejected the credential during {name}: {e}")
            return tool_error(str(NotAuthenticatedError()))
        except (google.auth.exceptions.TransportError, httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"❌ Network error in {name}: {e}")
            return tool_error(f"API Error: request to YouTube failed: {e}")

        logger.debug(f"Tool {name} completed")
        return tool_result(response)

    def _search_videos(self, args: SearchVideosArguments) -> Dict[str, Any]:
        return self.youtube.search_videos(
            query=args.query,
            channel_id=args.channel_id,
            limit=args.limit
        )

    def _get_video_metadata(self, args: GetVideoMetadataArguments) -> Dict[str, Any]:
        return self.youtube.get_video_metadata(args.video_id)

    def _get_video_comments(self, args: GetVideoCommentsArguments) -> Dict[str, Any]:
        return self.youtube.get_video_comments(
            video_id=args.video_id,
            order=args.order,
            limit=args.limit
        )

    def _reply_to_comment(self, args: ReplyToCommentArguments) -> Dict[str, Any]:
        return self.youtube.reply_to_comment(args.comment_id, args.text)

    def _add_video_to_playlist(self, args: AddVideoToPlaylistArguments) -> Dict[str, Any]:
        return self.youtube.add_video_to_playlist(args.playlist_id, args.video_id)
