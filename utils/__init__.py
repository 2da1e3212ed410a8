#!/usr/bin/env python3
"""
Utils package for YouTube Toolkit MCP Server
Provides input validation and locking primitives
"""

from .locks import ReadWriteLock

from .validators import (
    validator,
    ValidationError,
    validate_video_id,
    validate_channel_id,
    validate_search_query,
    validate_limit,
    validate_comment_order,
    validate_comment_text,
    sanitize_text
)

__all__ = [
    # Locks
    'ReadWriteLock',

    # Validators
    'validator',
    'ValidationError',
    'validate_video_id',
    'validate_channel_id',
    'validate_search_query',
    'validate_limit',
    'validate_comment_order',
    'validate_comment_text',
    'sanitize_text',
]
