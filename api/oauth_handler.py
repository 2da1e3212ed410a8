"""
OAuth HTTP endpoints
Browser authorization flow, discovery documents and the /mcp gate
"""

import html
import asyncio
import logging
import secrets
from functools import wraps
from typing import Any, Awaitable, Callable, Optional

from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response

from auth import ExchangeError, NotAuthenticatedError, OAuth2Manager, OAuthMetadataProvider
from tools import tool_error

from .jsonrpc import success_response
from .mcp_handler import parse_message

logger = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]

UNAUTHORIZED_DESCRIPTION = "Not authenticated with Google. Please visit /oauth/authorize to log in."

PAGE_STYLE = "body{font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px; text-align: center;}"

AUTHORIZE_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>YouTube MCP Server - Authorization</title>
    <style>
        {style}
        .button {{ display: inline-block; padding: 12px 24px; background-color: #4285f4; color: white; text-decoration: none; border-radius: 4px; margin: 20px 0; }}
        .button:hover {{ background-color: #3367d6; }}
    </style>
</head>
<body>
    <h1>YouTube MCP Server Authorization</h1>
    <p>This server needs permission to use the YouTube Data API on your behalf.</p>
    <p>Click the button below to sign in with your Google account.</p>
    <a href="{auth_url}" class="button">Authorize with Google</a>
</body>
</html>
"""

RESULT_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>{title}</title>
    <style>{style}</style>
</head>
<body>
    <h1>{heading}</h1>
    <p>{message}</p>
</body>
</html>
"""


def render_result_page(title: str, heading: str, message: str, status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(
        RESULT_PAGE.format(
            title=html.escape(title),
            style=PAGE_STYLE,
            heading=html.escape(heading),
            message=html.escape(message),
        ),
        status_code=status_code
    )


class OAuthHandler:
    """
    HTTP side of the Google OAuth flow

    The consent URL carries a per-process random state that the callback
    must echo back; a callback without it is rejected before any exchange.
    """

    def __init__(
        self,
        oauth_manager: OAuth2Manager,
        metadata_provider: OAuthMetadataProvider,
        state: Optional[str] = None
    ):
        self.oauth_manager = oauth_manager
        self.metadata_provider = metadata_provider
        self.state = state or secrets.token_urlsafe(32)

    async def authorize(self, request: Request) -> Response:
        """GET /oauth/authorize - page linking to Google's consent screen"""
        auth_url = self.oauth_manager.build_authorization_url(self.state)
        logger.info("Serving Google authorization page")
        return HTMLResponse(
            AUTHORIZE_PAGE.format(style=PAGE_STYLE, auth_url=html.escape(auth_url, quote=True))
        )

    async def callback(self, request: Request) -> Response:
        """GET /oauth/callback - exchange Google's authorization code"""
        params = request.query_params
        error = params.get("error")
        code = params.get("code")

        if error:
            logger.warning(f"OAuth error from Google: {error}")
            return render_result_page(
                "Authentication Failed", "❌ Authentication Failed",
                f"OAuth error from Google: {error}", status_code=400
            )

        if not code:
            logger.warning("OAuth callback without an authorization code")
            return render_result_page(
                "Authentication Failed", "❌ Authentication Failed",
                "Missing authorization code from Google", status_code=400
            )

        if not secrets.compare_digest(params.get("state", "").encode(), self.state.encode()):
            logger.warning("OAuth callback with invalid state; ignoring code")
            return render_result_page(
                "Authentication Failed", "❌ Authentication Failed",
                "Invalid OAuth state. Please restart at /oauth/authorize", status_code=400
            )

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self.oauth_manager.exchange_code, code)
        except ExchangeError as e:
            return render_result_page(
                "Authentication Failed", "❌ Authentication Failed",
                f"Failed to exchange Google code for token: {e}", status_code=500
            )

        return render_result_page(
            "Authentication Successful", "✅ Authentication Successful!",
            "You can now close this window and return to your application."
        )

    async def protected_resource_metadata(self, request: Request) -> Response:
        """GET /.well-known/oauth-protected-resource"""
        return JSONResponse(self.metadata_provider.get_protected_resource_metadata())

    async def authorization_server_metadata(self, request: Request) -> Response:
        """GET /.well-known/oauth-authorization-server"""
        return JSONResponse(self.metadata_provider.get_authorization_server_metadata())

    def require_auth(self, endpoint: Endpoint) -> Endpoint:
        """
        Wrap an endpoint so it only runs once a Google credential is held

        Args:
            endpoint: Starlette endpoint to protect

        Returns:
            Endpoint answering 401 until the browser flow has completed
        """
        @wraps(endpoint)
        async def guarded(request: Request) -> Response:
            if not self.oauth_manager.is_authenticated():
                return await self.send_unauthorized(request)
            return await endpoint(request)

        return guarded

    async def send_unauthorized(self, request: Request) -> Response:
        """
        Build the 401 response for an unauthenticated request

        A JSON-RPC tools/call gets a tool-result error echoing its id so
        the client can relay the login hint; anything else gets the plain
        OAuth error body.
        """
        headers = {
            "WWW-Authenticate": self.metadata_provider.generate_www_authenticate_header(
                error="invalid_token",
                error_description=UNAUTHORIZED_DESCRIPTION
            )
        }
        logger.info(f"Rejected unauthenticated {request.method} {request.url.path}")

        message = await self._read_message(request)
        if (
            isinstance(message, dict)
            and message.get("method") == "tools/call"
            and "id" in message
        ):
            result = tool_error(str(NotAuthenticatedError()))
            return JSONResponse(
                success_response(message["id"], result),
                status_code=401,
                headers=headers
            )

        return JSONResponse(
            {"error": "unauthorized", "error_description": UNAUTHORIZED_DESCRIPTION},
            status_code=401,
            headers=headers
        )

    async def _read_message(self, request: Request) -> Any:
        if request.method != "POST":
            return None
        try:
            return parse_message(await request.body())
        except ValueError:
            return None
