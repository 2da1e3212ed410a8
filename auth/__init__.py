"""
OAuth2 Authentication Module
Single-user Google OAuth2 session for the YouTube Data API
"""

from .exceptions import OAuthError, ExchangeError, NotAuthenticatedError
from .models import Credential
from .oauth2_manager import OAuth2Manager
from .oauth_metadata import MetadataConfig, OAuthMetadataProvider
from .token_storage import TokenStorage

__all__ = [
    'OAuth2Manager',
    'TokenStorage',
    'Credential',
    'OAuthError',
    'ExchangeError',
    'NotAuthenticatedError',
    'MetadataConfig',
    'OAuthMetadataProvider',
]
