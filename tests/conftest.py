#!/usr/bin/env python3
"""
Shared fixtures for YouTube Toolkit MCP Server tests
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from auth import Credential, OAuth2Manager, TokenStorage
from config import AppConfig, CorsConfig, GoogleOAuthConfig, ServerConfig

SERVER_URL = "http://localhost:8080"


@pytest.fixture
def oauth_config():
    """Google OAuth client configuration with test values"""
    return GoogleOAuthConfig(
        client_id="test-client-id.apps.googleusercontent.com",
        client_secret="test-client-secret",
        redirect_uri=f"{SERVER_URL}/oauth/callback"
    )


@pytest.fixture
def app_config(oauth_config):
    """Full application configuration"""
    return AppConfig(
        google=oauth_config,
        server=ServerConfig(
            host="127.0.0.1",
            port=8080,
            server_url=SERVER_URL,
            log_level="DEBUG",
            environment="test",
            refresh_interval_seconds=3600,
            shutdown_grace_seconds=1.0
        ),
        cors=CorsConfig(
            allowed_origins=["https://claude.ai", "https://*.claude.ai", "http://localhost:*"]
        )
    )


@pytest.fixture
def fresh_credential():
    """Credential valid for another hour"""
    return Credential(
        access_token="fresh-access-token",
        refresh_token="refresh-token",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scopes=("https://www.googleapis.com/auth/youtube.force-ssl",)
    )


@pytest.fixture
def expired_credential():
    """Credential that expired a minute ago"""
    return Credential(
        access_token="expired-access-token",
        refresh_token="refresh-token",
        expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        scopes=("https://www.googleapis.com/auth/youtube.force-ssl",)
    )


@pytest.fixture
def token_storage():
    """Empty token holder"""
    return TokenStorage()


@pytest.fixture
def oauth_manager(oauth_config, token_storage):
    """Session manager whose token refreshes never touch the network"""
    return OAuth2Manager(oauth_config, token_storage, request_factory=Mock)


@pytest.fixture
def fake_refresh():
    """Factory of side_effects for patching Credentials.refresh (autospec passes self)"""
    def make(new_token="refreshed-access-token", lifetime=timedelta(hours=1)):
        def _refresh(creds, request):
            creds.token = new_token
            creds.expiry = datetime.now(timezone.utc).replace(tzinfo=None) + lifetime
        return _refresh
    return make
