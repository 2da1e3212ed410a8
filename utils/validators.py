#!/usr/bin/env python3
"""
Input validation for YouTube Toolkit MCP Server
Validates and normalizes tool arguments
"""

import re
import logging
from typing import Optional, Any
from urllib.parse import urlparse, parse_qs

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{11}$')
CHANNEL_ID_PATTERN = re.compile(r'^UC[A-Za-z0-9_-]{22}$')

# YouTube Data API limits
MAX_SEARCH_RESULTS = 50
MAX_COMMENT_RESULTS = 100
MAX_QUERY_LENGTH = 500
MAX_COMMENT_LENGTH = 10000

# sort_by values accepted by get_video_comments -> commentThreads.list order
COMMENT_ORDER_MAP = {
    'top': 'relevance',
    'relevance': 'relevance',
    'new': 'time',
    'newest': 'time',
    'time': 'time',
}


class ValidationError(ValueError):
    """Raised when a tool argument is present but invalid"""
    pass


class InputValidator:
    """Validates and sanitizes tool arguments"""

    def validate_video_id(self, url_or_id: str) -> str:
        """
        Validate and extract video ID from URL or ID

        Args:
            url_or_id: YouTube video URL or ID

        Returns:
            Validated video ID

        Raises:
            ValidationError: If URL/ID is invalid
        """
        url_or_id = url_or_id.strip()

        # Already a video ID (11 chars, alphanumeric with - and _)
        if VIDEO_ID_PATTERN.match(url_or_id):
            return url_or_id

        parsed = urlparse(url_or_id)

        # youtube.com/watch?v=...
        if parsed.hostname in ('www.youtube.com', 'youtube.com', 'm.youtube.com'):
            query_params = parse_qs(parsed.query)
            if query_params.get('v') and VIDEO_ID_PATTERN.match(query_params['v'][0]):
                return query_params['v'][0]

        # youtu.be/...
        elif parsed.hostname == 'youtu.be':
            video_id = parsed.path.lstrip('/')
            if VIDEO_ID_PATTERN.match(video_id):
                return video_id

        raise ValidationError(
            f"Invalid YouTube video URL or ID: {url_or_id[:50]}. "
            "Expected format: https://www.youtube.com/watch?v=VIDEO_ID or VIDEO_ID"
        )

    def validate_channel_id(self, url_or_id: str) -> str:
        """
        Validate channel ID or channel URL

        Args:
            url_or_id: YouTube channel ID (UC...) or .../channel/UC... URL

        Returns:
            Validated channel ID

        Raises:
            ValidationError: If input is invalid
        """
        url_or_id = url_or_id.strip()

        if CHANNEL_ID_PATTERN.match(url_or_id):
            return url_or_id

        if '/channel/' in url_or_id:
            channel_id = url_or_id.split('/channel/')[-1].split('?')[0].split('/')[0]
            if CHANNEL_ID_PATTERN.match(channel_id):
                return channel_id

        raise ValidationError(
            f"Invalid YouTube channel ID: {url_or_id[:50]}. "
            "Expected: channel ID (UC...) or channel URL"
        )

    def validate_search_query(self, query: str) -> str:
        """
        Validate search query length

        Raises:
            ValidationError: If query is too long
        """
        query = query.strip()

        if len(query) > MAX_QUERY_LENGTH:
            raise ValidationError(
                f"Search query too long (max {MAX_QUERY_LENGTH} characters)"
            )

        return query

    def validate_limit(self, limit: Any, maximum: int) -> Optional[int]:
        """
        Validate a result limit

        JSON numbers may arrive as floats; integral values are accepted.
        None means "use the tool's default".

        Args:
            limit: Raw argument value
            maximum: Largest value the API accepts

        Returns:
            Validated integer, or None

        Raises:
            ValidationError: If the value is not an integer in 1..maximum
        """
        if limit is None:
            return None

        # bool is an int subclass but never a valid count
        if isinstance(limit, bool):
            raise ValidationError(f"limit must be an integer, got: {type(limit).__name__}")

        if isinstance(limit, float):
            if not limit.is_integer():
                raise ValidationError(f"limit must be an integer, got: {limit}")
            limit = int(limit)

        if not isinstance(limit, int):
            raise ValidationError(f"limit must be an integer, got: {type(limit).__name__}")

        if limit < 1 or limit > maximum:
            raise ValidationError(f"limit must be between 1 and {maximum}, got: {limit}")

        return limit

    def validate_comment_order(self, sort_by: str) -> str:
        """
        Map a sort_by value to a commentThreads order

        Raises:
            ValidationError: If sort_by is not recognized
        """
        order = COMMENT_ORDER_MAP.get(sort_by.strip().lower())
        if order is None:
            raise ValidationError(
                f"Invalid sort_by: {sort_by}. "
                f"Valid options: {', '.join(sorted(COMMENT_ORDER_MAP))}"
            )
        return order

    def validate_comment_text(self, text: str) -> str:
        """
        Validate reply text

        Raises:
            ValidationError: If text exceeds YouTube's comment limit
        """
        text = self.sanitize_text(text)
        if len(text) > MAX_COMMENT_LENGTH:
            raise ValidationError(
                f"Comment text too long (max {MAX_COMMENT_LENGTH} characters)"
            )
        return text

    def sanitize_text(self, text: str, max_length: Optional[int] = None) -> str:
        """
        Sanitize text input (remove control characters, limit length)

        Args:
            text: Text to sanitize
            max_length: Maximum length (optional)

        Returns:
            Sanitized text
        """
        if not text or not isinstance(text, str):
            return ""

        # Remove control characters except newlines and tabs
        text = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', text)

        if max_length and len(text) > max_length:
            text = text[:max_length]

        return text.strip()


# Global validator instance
validator = InputValidator()


# Convenience functions for easy import
def validate_video_id(url_or_id: str) -> str:
    """Validate video URL or ID"""
    return validator.validate_video_id(url_or_id)


def validate_channel_id(url_or_id: str) -> str:
    """Validate channel URL or ID"""
    return validator.validate_channel_id(url_or_id)


def validate_search_query(query: str) -> str:
    """Validate search query"""
    return validator.validate_search_query(query)


def validate_limit(limit: Any, maximum: int) -> Optional[int]:
    """Validate result limit"""
    return validator.validate_limit(limit, maximum)


def validate_comment_order(sort_by: str) -> str:
    """Validate comment sort order"""
    return validator.validate_comment_order(sort_by)


def validate_comment_text(text: str) -> str:
    """Validate reply text"""
    return validator.validate_comment_text(text)


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """Sanitize text"""
    return validator.sanitize_text(text, max_length)
