#!/usr/bin/env python3
"""
YouTube Toolkit MCP Server
Remote Model Context Protocol server exposing YouTube Data API tools.

FEATURES:
- ✅ Single-user Google OAuth2 browser flow (/oauth/authorize)
- ✅ In-memory token holder with lazy and background refresh
- ✅ JSON-RPC 2.0 MCP endpoint (POST /mcp)
- ✅ OAuth discovery metadata (RFC 8414 / RFC 9728)
- ✅ CORS for browser-based MCP clients

Provides tools for:
- Video search
- Video metadata
- Comments (read and reply)
- Playlists (add videos)
"""

import sys
import asyncio
import logging
import contextlib
from typing import Any, Dict, Optional

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Route

from api import MCPHandler, OAuthHandler
from auth import MetadataConfig, OAuth2Manager, OAuthMetadataProvider, TokenStorage
from config import AppConfig, ConfigurationError, load_config
from tools import TOOLS, ToolDispatcher
from youtube_client import YouTubeClient

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

HEALTH_RESPONSE = {"status": "healthy", "server": "youtube-mcp-server", "version": "1.0.0"}

INFO_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>YouTube MCP Server</title>
    <style>
        body {{ font-family: Arial, sans-serif; max-width: 800px; margin: 50px auto; padding: 20px; }}
        .header {{ text-align: center; margin-bottom: 40px; }}
        .section {{ margin: 30px 0; }}
        .code {{ background-color: #f5f5f5; padding: 10px; border-radius: 4px; font-family: monospace; }}
        .endpoint {{ margin: 10px 0; }}
    </style>
</head>
<body>
    <div class="header">
        <h1>YouTube MCP Server</h1>
        <p>Model Context Protocol server for the YouTube Data API</p>
    </div>

    <div class="section">
        <h2>Server Status</h2>
        <p>✅ Server is running and healthy</p>
        <p>🔐 Google account: {auth_status}</p>
    </div>

    <div class="section">
        <h2>Available Endpoints</h2>
        <div class="endpoint">
            <strong>OAuth Discovery:</strong>
            <div class="code">GET /.well-known/oauth-protected-resource</div>
            <div class="code">GET /.well-known/oauth-authorization-server</div>
        </div>
        <div class="endpoint">
            <strong>OAuth Flow:</strong>
            <div class="code">GET /oauth/authorize</div>
            <div class="code">GET /oauth/callback</div>
        </div>
        <div class="endpoint">
            <strong>MCP Protocol:</strong>
            <div class="code">POST {server_url}/mcp (requires authentication)</div>
        </div>
    </div>

    <div class="section">
        <h2>Available Tools</h2>
        <ul>
{tool_items}
        </ul>
    </div>
</body>
</html>
"""


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn unhandled exceptions into a 500 response so the server keeps serving"""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"❌ Unhandled error serving {request.method} {request.url.path}")
            return JSONResponse(
                {"error": "internal_error", "error_description": "Internal server error"},
                status_code=500
            )


def describe_token(token_info: Dict[str, Any]) -> str:
    """One-line account status for the info page"""
    if not token_info.get('authenticated'):
        return "not connected (visit /oauth/authorize)"
    if token_info.get('expired') and not token_info.get('has_refresh_token'):
        return "session expired (visit /oauth/authorize)"
    if token_info.get('expiry'):
        return f"connected (access token expires {token_info['expiry']})"
    return "connected"


def create_app(config: AppConfig, oauth_manager: Optional[OAuth2Manager] = None) -> Starlette:
    """
    Build the Starlette application

    Args:
        config: Application configuration
        oauth_manager: Session manager to use (a fresh one over an empty
            token holder when omitted)

    Returns:
        ASGI application; the background token refresher runs for the
        lifetime of its lifespan
    """
    if oauth_manager is None:
        oauth_manager = OAuth2Manager(config.google, TokenStorage())

    metadata_provider = OAuthMetadataProvider(
        MetadataConfig(server_url=config.server.server_url)
    )
    oauth_handler = OAuthHandler(oauth_manager, metadata_provider)
    mcp_handler = MCPHandler(ToolDispatcher(YouTubeClient(oauth_manager)))

    async def index(request: Request) -> Response:
        tool_items = "\n".join(
            f"            <li><strong>{tool.name}</strong> - {tool.description}</li>"
            for tool in TOOLS
        )
        auth_status = describe_token(oauth_manager.get_token_info())
        return HTMLResponse(INFO_PAGE.format(
            server_url=config.server.server_url,
            auth_status=auth_status,
            tool_items=tool_items
        ))

    async def health(request: Request) -> Response:
        return JSONResponse(HEALTH_RESPONSE)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        refresher = asyncio.create_task(
            oauth_manager.token_refresher(config.server.refresh_interval_seconds)
        )
        logger.info(f"🚀 YouTube MCP Server ready at {config.server.server_url}")
        try:
            yield
        finally:
            logger.info("Shutting down server...")
            refresher.cancel()
            try:
                await asyncio.wait_for(refresher, timeout=config.server.shutdown_grace_seconds)
            except (asyncio.CancelledError, asyncio.TimeoutError):
                pass
            logger.info("Server exiting")

    routes = [
        Route("/", index, methods=["GET"]),
        Route("/health", health, methods=["GET"]),
        Route("/oauth/authorize", oauth_handler.authorize, methods=["GET"]),
        Route("/oauth/callback", oauth_handler.callback, methods=["GET"]),
        Route(
            "/.well-known/oauth-protected-resource",
            oauth_handler.protected_resource_metadata,
            methods=["GET"]
        ),
        Route(
            "/.well-known/oauth-authorization-server",
            oauth_handler.authorization_server_metadata,
            methods=["GET"]
        ),
        Route("/mcp", oauth_handler.require_auth(mcp_handler.handle), methods=["POST"]),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=config.cors.exact_origins(),
            allow_origin_regex=config.cors.origin_regex(),
            allow_methods=config.cors.allowed_methods,
            allow_headers=config.cors.allowed_headers,
            expose_headers=config.cors.exposed_headers,
            allow_credentials=config.cors.allow_credentials,
            max_age=config.cors.max_age,
        ),
        Middleware(RecoveryMiddleware),
    ]

    app = Starlette(routes=routes, middleware=middleware, lifespan=lifespan)
    app.state.config = config
    app.state.oauth_manager = oauth_manager
    app.state.oauth_handler = oauth_handler
    return app


def main():
    """Load configuration, then serve until SIGINT/SIGTERM"""
    try:
        config = load_config()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"❌ Failed to load config: {e}")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.server.log_level),
        format=LOG_FORMAT
    )

    logger.info("Starting YouTube Toolkit MCP Server v2.0")
    logger.info(f"Environment: {config.server.environment}")
    logger.info(f"OAuth redirect URI: {config.google.redirect_uri}")
    logger.info(f"To authenticate, visit: {config.server.server_url}/oauth/authorize")

    app = create_app(config)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower(),
        timeout_graceful_shutdown=30
    )


if __name__ == "__main__":
    main()
