"""
Tool argument schemas
Decodes tools/call arguments into typed, range-checked values
"""

from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type

import pydantic
from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

from utils.validators import (
    MAX_COMMENT_RESULTS,
    MAX_SEARCH_RESULTS,
    validate_channel_id,
    validate_comment_order,
    validate_comment_text,
    validate_limit,
    validate_search_query,
    validate_video_id,
)


class InvalidArgumentsError(Exception):
    """Arguments are present but have the wrong type or an invalid value"""

    def __init__(self, tool_name: str, errors: List[Dict[str, Any]]):
        self.tool_name = tool_name
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ())) or 'arguments'}: {error['msg']}"
            for error in errors
        )
        super().__init__(f"Invalid arguments for {tool_name}: {details}")


class ToolArguments(BaseModel):
    """
    Base schema for tool arguments

    Required string arguments are declared optional so that an absent or
    empty value can be reported as a tool error ("<name> is required")
    rather than a protocol error; see ``missing_required``.
    """

    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True, frozen=True)

    required_fields: ClassVar[Tuple[str, ...]] = ()

    def missing_required(self) -> List[str]:
        return [name for name in self.required_fields if not getattr(self, name)]


class SearchVideosArguments(ToolArguments):
    required_fields: ClassVar[Tuple[str, ...]] = ('query',)

    query: Optional[StrictStr] = None
    channel_id: Optional[StrictStr] = None
    limit: int = 10

    @field_validator('query')
    @classmethod
    def _check_query(cls, v):
        return validate_search_query(v) if v else v

    @field_validator('channel_id')
    @classmethod
    def _check_channel_id(cls, v):
        return validate_channel_id(v) if v else None

    @field_validator('limit', mode='before')
    @classmethod
    def _check_limit(cls, v):
        limit = validate_limit(v, MAX_SEARCH_RESULTS)
        return cls.model_fields['limit'].default if limit is None else limit


class GetVideoMetadataArguments(ToolArguments):
    required_fields: ClassVar[Tuple[str, ...]] = ('video_id',)

    video_id: Optional[StrictStr] = None

    @field_validator('video_id')
    @classmethod
    def _check_video_id(cls, v):
        return validate_video_id(v) if v else v


class GetVideoCommentsArguments(ToolArguments):
    required_fields: ClassVar[Tuple[str, ...]] = ('video_id',)

    video_id: Optional[StrictStr] = None
    sort_by: Optional[StrictStr] = 'top'
    limit: int = 20

    @field_validator('video_id')
    @classmethod
    def _check_video_id(cls, v):
        return validate_video_id(v) if v else v

    @field_validator('sort_by')
    @classmethod
    def _check_sort_by(cls, v):
        if not v:
            return 'top'
        validate_comment_order(v)
        return v.lower()

    @field_validator('limit', mode='before')
    @classmethod
    def _check_limit(cls, v):
        limit = validate_limit(v, MAX_COMMENT_RESULTS)
        return cls.model_fields['limit'].default if limit is None else limit

    @property
    def order(self) -> str:
        """commentThreads.list order for sort_by"""
        return validate_comment_order(self.sort_by)


class ReplyToCommentArguments(ToolArguments):
    required_fields: ClassVar[Tuple[str, ...]] = ('comment_id', 'text')

    comment_id: Optional[StrictStr] = None
    text: Optional[StrictStr] = None

    @field_validator('text')
    @classmethod
    def _check_text(cls, v):
        return validate_comment_text(v) if v else v


class AddVideoToPlaylistArguments(ToolArguments):
    required_fields: ClassVar[Tuple[str, ...]] = ('playlist_id', 'video_id')

    playlist_id: Optional[StrictStr] = None
    video_id: Optional[StrictStr] = None

    @field_validator('video_id')
    @classmethod
    def _check_video_id(cls, v):
        return validate_video_id(v) if v else v


ARGUMENT_SCHEMAS: Dict[str, Type[ToolArguments]] = {
    'search_videos': SearchVideosArguments,
    'get_video_metadata': GetVideoMetadataArguments,
    'get_video_comments': GetVideoCommentsArguments,
    'reply_to_comment': ReplyToCommentArguments,
    'add_video_to_playlist': AddVideoToPlaylistArguments,
}


def decode_arguments(tool_name: str, arguments: Any) -> ToolArguments:
    """
    Decode raw tools/call arguments for a tool

    Args:
        tool_name: Name of a tool in ARGUMENT_SCHEMAS
        arguments: Raw ``arguments`` value from the request (None means {})

    Returns:
        Validated arguments model

    Raises:
        InvalidArgumentsError: If any argument has the wrong type or value
    """
    schema = ARGUMENT_SCHEMAS[tool_name]

    if arguments is None:
        arguments = {}

    if not isinstance(arguments, dict):
        raise InvalidArgumentsError(
            tool_name,
            [{'loc': (), 'msg': 'arguments must be an object', 'type': 'dict_type'}]
        )

    try:
        return schema.model_validate(arguments)
    except pydantic.ValidationError as e:
        raise InvalidArgumentsError(
            tool_name,
            e.errors(include_url=False, include_context=False, include_input=False)
        ) from e
