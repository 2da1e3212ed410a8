"""
Tool catalog
MCP tool definitions advertised through tools/list
"""

from typing import List

from mcp.types import Tool

from utils.validators import MAX_COMMENT_RESULTS, MAX_SEARCH_RESULTS

TOOLS: List[Tool] = [
    Tool(
        name="search_videos",
        description=(
            "Search YouTube for videos matching a query, optionally restricted to one channel. "
            "Returns the raw YouTube search response."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search terms"
                },
                "channel_id": {
                    "type": "string",
                    "description": "Restrict results to this channel (UC... ID or channel URL)"
                },
                "limit": {
                    "type": "integer",
                    "description": f"Maximum results (1-{MAX_SEARCH_RESULTS}, default 10)",
                    "minimum": 1,
                    "maximum": MAX_SEARCH_RESULTS,
                    "default": 10
                }
            },
            "required": ["query"]
        },
    ),
    Tool(
        name="get_video_metadata",
        description="Get snippet, statistics and content details for a video.",
        inputSchema={
            "type": "object",
            "properties": {
                "video_id": {
                    "type": "string",
                    "description": "Video ID or YouTube URL"
                }
            },
            "required": ["video_id"]
        },
    ),
    Tool(
        name="get_video_comments",
        description="Get top-level comment threads (with replies) for a video.",
        inputSchema={
            "type": "object",
            "properties": {
                "video_id": {
                    "type": "string",
                    "description": "Video ID or YouTube URL"
                },
                "sort_by": {
                    "type": "string",
                    "description": "'top' (relevance) or 'new' (time)",
                    "enum": ["top", "new", "relevance", "time", "newest"],
                    "default": "top"
                },
                "limit": {
                    "type": "integer",
                    "description": f"Maximum comment threads (1-{MAX_COMMENT_RESULTS}, default 20)",
                    "minimum": 1,
                    "maximum": MAX_COMMENT_RESULTS,
                    "default": 20
                }
            },
            "required": ["video_id"]
        },
    ),
    Tool(
        name="reply_to_comment",
        description=(
            "Reply to a YouTube comment as the authenticated channel. "
            "Only allowed where the channel owner may post."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "comment_id": {
                    "type": "string",
                    "description": "ID of the comment to reply to"
                },
                "text": {
                    "type": "string",
                    "description": "Reply text"
                }
            },
            "required": ["comment_id", "text"]
        },
    ),
    Tool(
        name="add_video_to_playlist",
        description="Add a video to the end of a playlist owned by the authenticated channel.",
        inputSchema={
            "type": "object",
            "properties": {
                "playlist_id": {
                    "type": "string",
                    "description": "Target playlist ID"
                },
                "video_id": {
                    "type": "string",
                    "description": "Video ID or YouTube URL"
                }
            },
            "required": ["playlist_id", "video_id"]
        },
    ),
]


def list_tools() -> List[Tool]:
    """Return the tool catalog in a stable order"""
    return list(TOOLS)
