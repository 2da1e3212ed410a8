"""
YouTube API Client
Issues YouTube Data API v3 calls on behalf of the authenticated user
"""

import logging
from typing import Optional, Dict, Any

from auth import OAuth2Manager

logger = logging.getLogger(__name__)


class YouTubeClient:
    """
    YouTube Data API operations backed by the OAuth2 session

    Every method acquires a freshly authenticated client (refreshing
    the token if needed) and issues exactly one API request. Errors are
    not retried: NotAuthenticatedError and googleapiclient HttpError
    propagate to the caller.
    """

    def __init__(self, oauth_manager: OAuth2Manager):
        """
        Initialize YouTube API client

        Args:
            oauth_manager: Source of authenticated API clients
        """
        self.oauth_manager = oauth_manager

    def search_videos(
        self,
        query: str,
        channel_id: Optional[str] = None,
        limit: int = 10
    ) -> Dict[str, Any]:
        """
        Search for videos

        Quota Cost: 100 units
        """
        youtube = self.oauth_manager.get_authenticated_service()

        params = {
            'part': 'id,snippet',
            'q': query,
            'type': 'video',
            'maxResults': limit,
        }
        if channel_id:
            params['channelId'] = channel_id

        logger.info(f"Searching videos: '{query}' (max={limit}, channel={channel_id})")
        return youtube.search().list(**params).execute()

    def get_video_metadata(self, video_id: str) -> Dict[str, Any]:
        """
        Get snippet, statistics and content details for a video

        Quota Cost: 1 unit
        """
        youtube = self.oauth_manager.get_authenticated_service()

        logger.info(f"Fetching metadata for video {video_id}")
        return youtube.videos().list(
            part='snippet,statistics,contentDetails',
            id=video_id
        ).execute()

    def get_video_comments(
        self,
        video_id: str,
        order: str = 'relevance',
        limit: int = 20
    ) -> Dict[str, Any]:
        """
        Get top-level comment threads for a video

        Args:
            video_id: Video ID
            order: commentThreads order ('relevance' or 'time')
            limit: Maximum threads (1-100)

        Quota Cost: 1 unit
        """
        youtube = self.oauth_manager.get_authenticated_service()

        logger.info(f"Fetching {limit} comments for video {video_id} (order={order})")
        return youtube.commentThreads().list(
            part='snippet,replies',
            videoId=video_id,
            order=order,
            maxResults=limit
        ).execute()

    def reply_to_comment(self, comment_id: str, text: str) -> Dict[str, Any]:
        """
        Post a reply to a comment

        ⚠️ Owner-only: YouTube rejects replies the channel owner may not post.

        Quota Cost: 50 units
        """
        youtube = self.oauth_manager.get_authenticated_service()

        body = {
            "snippet": {
                "parentId": comment_id,
                "textOriginal": text
            }
        }

        logger.info(f"Replying to comment {comment_id}")
        response = youtube.comments().insert(
            part="snippet",
            body=body
        ).execute()

        logger.info(f"✅ Reply posted: {response.get('id')}")
        return response

    def add_video_to_playlist(self, playlist_id: str, video_id: str) -> Dict[str, Any]:
        """
        Add a video to the end of a playlist

        ⚠️ Owner-only: the playlist must belong to the authenticated channel.

        Quota Cost: 50 units
        """
        youtube = self.oauth_manager.get_authenticated_service()

        body = {
            "snippet": {
                "playlistId": playlist_id,
                "resourceId": {
                    "kind": "youtube#video",
                    "videoId": video_id
                }
            }
        }

        logger.info(f"Adding video {video_id} to playlist {playlist_id}")
        response = youtube.playlistItems().insert(
            part="snippet",
            body=body
        ).execute()

        logger.info(f"✅ Video added successfully: {video_id}")
        return response
