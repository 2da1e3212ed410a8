#!/usr/bin/env python3
"""
Unit tests for tool argument decoding and the tool dispatcher
"""

import json
import pytest
from unittest.mock import Mock

import google.auth.exceptions
import httplib2
from googleapiclient.errors import HttpError

from auth import NotAuthenticatedError
from tools import InvalidArgumentsError, ToolDispatcher, UnknownToolError, decode_arguments
from youtube_client import YouTubeClient

VIDEO_ID = "dQw4w9WgXcQ"
CHANNEL_ID = "UCuAXFkgsw1L7xaCfnd5JJOw"


def _http_error(status, reason, message):
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(Mock(status=status, reason=reason), content)


def _is_error(result):
    # Wire name; newer mcp releases only expose it as a serialization alias
    return result.model_dump(by_alias=True)["isError"]


@pytest.fixture
def youtube():
    return Mock(spec=YouTubeClient)


@pytest.fixture
def dispatcher(youtube):
    return ToolDispatcher(youtube)


class TestArgumentDecoding:
    """Test strict decoding of tools/call arguments"""

    def test_search_defaults(self):
        """Test that limit defaults to 10 and channel_id to None"""
        args = decode_arguments("search_videos", {"query": "lofi"})
        assert args.query == "lofi"
        assert args.limit == 10
        assert args.channel_id is None

    def test_comment_defaults(self):
        """Test that comments default to 20 results ordered by relevance"""
        args = decode_arguments("get_video_comments", {"video_id": VIDEO_ID})
        assert args.limit == 20
        assert args.sort_by == "top"
        assert args.order == "relevance"

    def test_null_limit_means_default(self):
        """Test that an explicit null limit falls back to the default"""
        assert decode_arguments("search_videos", {"query": "q", "limit": None}).limit == 10

    def test_integral_float_limit(self):
        """Test that JSON numbers like 5.0 are accepted"""
        assert decode_arguments("search_videos", {"query": "q", "limit": 5.0}).limit == 5

    @pytest.mark.parametrize("limit", [0, 51, 5.5, "5", True])
    def test_invalid_search_limit(self, limit):
        """Test that bad limits are argument errors, not silent defaults"""
        with pytest.raises(InvalidArgumentsError) as exc_info:
            decode_arguments("search_videos", {"query": "q", "limit": limit})
        assert exc_info.value.errors[0]["loc"] == ("limit",)

    def test_comment_limit_allows_100(self):
        """Test the comment thread maximum"""
        assert decode_arguments("get_video_comments", {"video_id": VIDEO_ID, "limit": 100}).limit == 100

    def test_sort_by_new_maps_to_time(self):
        """Test sort_by mapping"""
        assert decode_arguments("get_video_comments", {"video_id": VIDEO_ID, "sort_by": "new"}).order == "time"

    def test_unknown_sort_by(self):
        """Test that unknown sort_by values are rejected"""
        with pytest.raises(InvalidArgumentsError):
            decode_arguments("get_video_comments", {"video_id": VIDEO_ID, "sort_by": "oldest"})

    def test_wrong_type_is_argument_error(self):
        """Test that a non-string query is rejected"""
        with pytest.raises(InvalidArgumentsError):
            decode_arguments("search_videos", {"query": 42})

    def test_arguments_must_be_object(self):
        """Test that non-object arguments are rejected"""
        with pytest.raises(InvalidArgumentsError):
            decode_arguments("search_videos", ["query"])

    def test_video_url_is_normalized(self):
        """Test that video URLs are reduced to IDs"""
        args = decode_arguments("get_video_metadata", {"video_id": f"https://youtu.be/{VIDEO_ID}"})
        assert args.video_id == VIDEO_ID

    def test_missing_required(self):
        """Test detection of absent and empty required strings"""
        assert decode_arguments("search_videos", {}).missing_required() == ["query"]
        assert decode_arguments("search_videos", {"query": "   "}).missing_required() == ["query"]
        assert decode_arguments(
            "reply_to_comment", {"comment_id": "abc"}
        ).missing_required() == ["text"]


class TestToolDispatcher:
    """Test tool execution and error mapping"""

    def test_list_tools(self, dispatcher):
        """Test the advertised catalog"""
        names = [tool.name for tool in dispatcher.list_tools()]
        assert names == [
            "search_videos",
            "get_video_metadata",
            "get_video_comments",
            "reply_to_comment",
            "add_video_to_playlist",
        ]
        for tool in dispatcher.list_tools():
            schema = tool.model_dump(by_alias=True)["inputSchema"]
            assert schema["type"] == "object"
            assert schema["required"]

    def test_unknown_tool(self, dispatcher):
        """Test that unknown tools raise for the protocol layer"""
        with pytest.raises(UnknownToolError):
            dispatcher.call_tool("get_transcript", {"video_id": VIDEO_ID})

    def test_empty_query_is_tool_error_without_api_call(self, dispatcher, youtube):
        """Test that an empty query never reaches YouTube"""
        result = dispatcher.call_tool("search_videos", {"query": ""})

        assert _is_error(result) is True
        assert result.content[0].text == "query is required"
        youtube.search_videos.assert_not_called()

    def test_search_success(self, dispatcher, youtube):
        """Test that the API response becomes JSON text content"""
        response = {"kind": "youtube#searchListResponse", "items": [{"id": {"videoId": VIDEO_ID}}]}
        youtube.search_videos.return_value = response

        result = dispatcher.call_tool(
            "search_videos", {"query": "never gonna", "channel_id": CHANNEL_ID, "limit": 3}
        )

        assert _is_error(result) is False
        assert json.loads(result.content[0].text) == response
        youtube.search_videos.assert_called_once_with(
            query="never gonna", channel_id=CHANNEL_ID, limit=3
        )

    def test_comments_use_defaults(self, dispatcher, youtube):
        """Test comment defaults reach the API call"""
        youtube.get_video_comments.return_value = {"items": []}

        dispatcher.call_tool("get_video_comments", {"video_id": VIDEO_ID})

        youtube.get_video_comments.assert_called_once_with(
            video_id=VIDEO_ID, order="relevance", limit=20
        )

    def test_reply_and_playlist_calls(self, dispatcher, youtube):
        """Test owner-only write tools"""
        youtube.reply_to_comment.return_value = {"id": "reply-1"}
        youtube.add_video_to_playlist.return_value = {"id": "item-1"}

        assert not _is_error(dispatcher.call_tool(
            "reply_to_comment", {"comment_id": "Ugz123", "text": "Thanks!"}
        ))
        assert not _is_error(dispatcher.call_tool(
            "add_video_to_playlist", {"playlist_id": "PL123", "video_id": VIDEO_ID}
        ))

        youtube.reply_to_comment.assert_called_once_with("Ugz123", "Thanks!")
        youtube.add_video_to_playlist.assert_called_once_with("PL123", VIDEO_ID)

    def test_not_authenticated_is_tool_error(self, dispatcher, youtube):
        """Test that a missing session points the user at the login page"""
        youtube.get_video_metadata.side_effect = NotAuthenticatedError()

        result = dispatcher.call_tool("get_video_metadata", {"video_id": VIDEO_ID})

        assert _is_error(result) is True
        assert "/oauth/authorize" in result.content[0].text

    def test_revoked_token_during_call_is_tool_error(self, dispatcher, youtube):
        """Test that a refresh failure inside the API call is reported as not authenticated"""
        youtube.get_video_metadata.side_effect = google.auth.exceptions.RefreshError("invalid_grant")

        result = dispatcher.call_tool("get_video_metadata", {"video_id": VIDEO_ID})

        assert _is_error(result) is True
        assert "/oauth/authorize" in result.content[0].text

    def test_http_error_is_tool_error_without_retry(self, dispatcher, youtube):
        """Test that provider errors carry YouTube's message and are not retried"""
        youtube.reply_to_comment.side_effect = _http_error(
            403, "Forbidden", "The comment cannot be created due to insufficient permissions."
        )

        result = dispatcher.call_tool("reply_to_comment", {"comment_id": "Ugz123", "text": "hi"})

        assert _is_error(result) is True
        assert result.content[0].text == (
            "API Error (403): The comment cannot be created due to insufficient permissions."
        )
        assert youtube.reply_to_comment.call_count == 1

    def test_network_error_is_tool_error(self, dispatcher, youtube):
        """Test that transport failures do not escape as exceptions"""
        youtube.search_videos.side_effect = ConnectionResetError("connection reset")

        result = dispatcher.call_tool("search_videos", {"query": "q"})

        assert _is_error(result) is True
        assert "connection reset" in result.content[0].text

    def test_dns_failure_is_tool_error(self, dispatcher, youtube):
        """Test that httplib2 lookup failures are reported like other network errors"""
        youtube.get_video_metadata.side_effect = httplib2.ServerNotFoundError(
            "Unable to find the server at youtube.googleapis.com"
        )

        result = dispatcher.call_tool("get_video_metadata", {"video_id": VIDEO_ID})

        assert _is_error(result) is True
        assert "Unable to find the server" in result.content[0].text

    def test_invalid_arguments_raise(self, dispatcher, youtube):
        """Test that invalid arguments are not executed"""
        with pytest.raises(InvalidArgumentsError):
            dispatcher.call_tool("get_video_comments", {"video_id": VIDEO_ID, "limit": 0})
        youtube.get_video_comments.assert_not_called()


class TestYouTubeClient:
    """Test that each operation issues exactly one API request"""

    @pytest.fixture
    def service(self):
        return Mock()

    @pytest.fixture
    def client(self, service):
        oauth_manager = Mock()
        oauth_manager.get_authenticated_service.return_value = service
        return YouTubeClient(oauth_manager)

    def test_search_videos(self, client, service):
        """Test search request parameters"""
        service.search.return_value.list.return_value.execute.return_value = {"items": []}

        assert client.search_videos("lofi", channel_id=CHANNEL_ID, limit=5) == {"items": []}

        service.search.return_value.list.assert_called_once_with(
            part='id,snippet', q='lofi', type='video', maxResults=5, channelId=CHANNEL_ID
        )

    def test_search_without_channel(self, client, service):
        """Test that channelId is omitted when not given"""
        client.search_videos("lofi")
        assert 'channelId' not in service.search.return_value.list.call_args.kwargs

    def test_get_video_metadata(self, client, service):
        """Test videos.list parts"""
        client.get_video_metadata(VIDEO_ID)
        service.videos.return_value.list.assert_called_once_with(
            part='snippet,statistics,contentDetails', id=VIDEO_ID
        )

    def test_get_video_comments(self, client, service):
        """Test commentThreads.list parameters"""
        client.get_video_comments(VIDEO_ID, order='time', limit=50)
        service.commentThreads.return_value.list.assert_called_once_with(
            part='snippet,replies', videoId=VIDEO_ID, order='time', maxResults=50
        )

    def test_reply_to_comment(self, client, service):
        """Test comments.insert body"""
        client.reply_to_comment("Ugz123", "Thanks!")
        service.comments.return_value.insert.assert_called_once_with(
            part="snippet",
            body={"snippet": {"parentId": "Ugz123", "textOriginal": "Thanks!"}}
        )
        service.comments.return_value.insert.return_value.execute.assert_called_once_with()

    def test_add_video_to_playlist(self, client, service):
        """Test playlistItems.insert body"""
        client.add_video_to_playlist("PL123", VIDEO_ID)
        body = service.playlistItems.return_value.insert.call_args.kwargs["body"]
        assert body["snippet"]["playlistId"] == "PL123"
        assert body["snippet"]["resourceId"] == {"kind": "youtube#video", "videoId": VIDEO_ID}
