#!/usr/bin/env python3
"""
Configuration management for YouTube Toolkit MCP Server
Google OAuth client settings, HTTP server settings and CORS policy
"""

import os
import re
import logging
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
from dotenv import load_dotenv

# Load environment variables from the .env next to this file (if any)
config_dir = Path(__file__).parent
env_file = config_dir / ".env"
load_dotenv(dotenv_path=env_file)

logger = logging.getLogger(__name__)


# Google OAuth 2.0 endpoints
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Scopes requested during the consent flow
YOUTUBE_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/youtube.force-ssl",
    "https://www.googleapis.com/auth/youtubepartner",
]

DEFAULT_PORT = 8080


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid"""
    pass


def _default_server_url() -> str:
    port = os.getenv("PORT") or DEFAULT_PORT
    return f"http://localhost:{port}"


class GoogleOAuthConfig(BaseModel):
    """Google OAuth client configuration (immutable for the process lifetime)"""

    model_config = {"frozen": True}

    client_id: str = Field(
        default="",
        validate_default=True,
        description="OAuth client ID from Google Cloud Console"
    )

    client_secret: str = Field(
        default="",
        validate_default=True,
        description="OAuth client secret from Google Cloud Console"
    )

    redirect_uri: str = Field(
        default="",
        validate_default=True,
        description="Callback URL registered for the OAuth client"
    )

    scopes: List[str] = Field(
        default_factory=lambda: list(YOUTUBE_SCOPES),
        description="OAuth scopes requested at consent time"
    )

    auth_uri: str = Field(
        default=GOOGLE_AUTH_URI,
        description="Authorization endpoint"
    )

    token_uri: str = Field(
        default=GOOGLE_TOKEN_URI,
        description="Token endpoint"
    )

    @field_validator('client_id', mode='before')
    @classmethod
    def set_client_id(cls, v):
        client_id = v or os.getenv("GOOGLE_CLIENT_ID")
        if not client_id:
            raise ValueError(
                "GOOGLE_CLIENT_ID environment variable is required. "
                "Please set it in your .env file or environment variables."
            )
        return client_id

    @field_validator('client_secret', mode='before')
    @classmethod
    def set_client_secret(cls, v):
        client_secret = v or os.getenv("GOOGLE_CLIENT_SECRET")
        if not client_secret:
            raise ValueError(
                "GOOGLE_CLIENT_SECRET environment variable is required. "
                "Please set it in your .env file or environment variables."
            )
        return client_secret

    @field_validator('redirect_uri', mode='before')
    @classmethod
    def set_redirect_uri(cls, v):
        if v:
            return v
        server_url = os.getenv("MCP_SERVER_URL") or _default_server_url()
        return os.getenv("GOOGLE_REDIRECT_URI") or f"{server_url.rstrip('/')}/oauth/callback"

    def to_client_config(self) -> dict:
        """Client config in the shape google-auth-oauthlib expects for web apps"""
        return {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
                "redirect_uris": [self.redirect_uri],
            }
        }


class ServerConfig(BaseModel):
    """HTTP server configuration"""

    host: str = Field(
        default="",
        validate_default=True,
        description="Interface to bind"
    )

    port: int = Field(
        default=0,
        validate_default=True,
        description="Port to bind"
    )

    server_url: str = Field(
        default="",
        validate_default=True,
        description="Public base URL of this server"
    )

    log_level: str = Field(
        default="",
        validate_default=True,
        description="Logging level"
    )

    environment: str = Field(
        default="",
        validate_default=True,
        description="Environment: development, staging, or production"
    )

    refresh_interval_seconds: int = Field(
        default=15 * 60,
        description="How often the background refresher inspects the token"
    )

    shutdown_grace_seconds: float = Field(
        default=5.0,
        description="How long shutdown waits for the refresher to stop"
    )

    @field_validator('host', mode='before')
    @classmethod
    def set_host(cls, v):
        return v or os.getenv("HOST", "0.0.0.0")

    @field_validator('port', mode='before')
    @classmethod
    def set_port(cls, v):
        return int(v or os.getenv("PORT") or DEFAULT_PORT)

    @field_validator('server_url', mode='before')
    @classmethod
    def set_server_url(cls, v):
        return (v or os.getenv("MCP_SERVER_URL") or _default_server_url()).rstrip('/')

    @field_validator('log_level', mode='before')
    @classmethod
    def set_log_level(cls, v):
        level = (v or os.getenv("LOG_LEVEL", "INFO")).upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Invalid LOG_LEVEL: {level}")
        return level

    @field_validator('environment', mode='before')
    @classmethod
    def set_environment(cls, v):
        return v or os.getenv("ENVIRONMENT", "development")


class CorsConfig(BaseModel):
    """CORS policy for browser-based MCP clients"""

    allowed_origins: List[str] = Field(
        default_factory=list,
        validate_default=True,
        description="Allowed origins; '*' inside an entry matches any characters"
    )

    allowed_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods"
    )

    allowed_headers: List[str] = Field(
        default=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
        description="Allowed request headers"
    )

    exposed_headers: List[str] = Field(
        default=["Link"],
        description="Response headers exposed to the browser"
    )

    allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )

    max_age: int = Field(
        default=300,
        description="CORS preflight cache duration (seconds)"
    )

    @field_validator('allowed_origins', mode='before')
    @classmethod
    def set_allowed_origins(cls, v):
        if v:
            return v
        env_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
        if env_origins:
            return [origin.strip() for origin in env_origins.split(",") if origin.strip()]
        return ["https://claude.ai", "https://*.claude.ai", "http://localhost:*"]

    def origin_regex(self) -> Optional[str]:
        """
        Build a regex covering the wildcard origins

        Starlette matches plain origins exactly; entries containing '*'
        are folded into one alternation for ``allow_origin_regex``.
        """
        patterns = [
            re.escape(origin).replace(r'\*', r'[^/]*')
            for origin in self.allowed_origins
            if '*' in origin
        ]
        if not patterns:
            return None
        return '^(' + '|'.join(patterns) + ')$'

    def exact_origins(self) -> List[str]:
        return [origin for origin in self.allowed_origins if '*' not in origin]


class AppConfig(BaseModel):
    """Application-wide configuration"""

    google: GoogleOAuthConfig = Field(default_factory=GoogleOAuthConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    cors: CorsConfig = Field(default_factory=CorsConfig)


def load_config() -> AppConfig:
    """
    Build the application configuration from the environment

    Raises:
        ConfigurationError: If required settings (client ID/secret) are missing
    """
    try:
        return AppConfig(
            google=GoogleOAuthConfig(),
            server=ServerConfig(),
            cors=CorsConfig()
        )
    except ValidationError as e:
        messages = "; ".join(error['msg'] for error in e.errors())
        raise ConfigurationError(messages) from e
