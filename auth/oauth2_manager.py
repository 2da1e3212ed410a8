"""
OAuth2 Session Manager for YouTube Toolkit MCP Server
Handles the authorization-code flow, token storage and refresh
"""

import os
import asyncio
import logging
import threading
from typing import Optional, Dict, Any, Callable
from datetime import datetime, timezone

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build, Resource
import google.auth.exceptions

from config import GoogleOAuthConfig

from .exceptions import ExchangeError, NotAuthenticatedError
from .models import Credential
from .token_storage import TokenStorage

# Google adds "openid" when userinfo scopes are requested; oauthlib would
# otherwise reject the token response as a scope change.
os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")

logger = logging.getLogger(__name__)

# Background refresher cadence and look-ahead window
REFRESH_INTERVAL_SECONDS = 15 * 60
PROACTIVE_REFRESH_WINDOW_SECONDS = 30 * 60


class OAuth2Manager:
    """
    Manages the single-user OAuth2 session for the YouTube Data API

    Features:
    - Authorization URL generation (offline access, forced consent)
    - Authorization code exchange
    - Lazy refresh when an API client is requested
    - Proactive background refresh with fail-fast clearing
    """

    def __init__(
        self,
        oauth_config: GoogleOAuthConfig,
        token_storage: TokenStorage,
        request_factory: Callable[[], Request] = Request
    ):
        """
        Initialize OAuth2 Manager

        Args:
            oauth_config: Google OAuth client configuration
            token_storage: Holder for the current credential
            request_factory: Builds the HTTP transport used for token refreshes
        """
        self.oauth_config = oauth_config
        self.token_storage = token_storage
        self._request_factory = request_factory

    # ------------------------------------------------------------------
    # Authorization-code flow
    # ------------------------------------------------------------------

    def _create_flow(self) -> Flow:
        flow = Flow.from_client_config(
            self.oauth_config.to_client_config(),
            scopes=list(self.oauth_config.scopes),
            redirect_uri=self.oauth_config.redirect_uri
        )
        # URL building and code exchange run in different requests, so no
        # PKCE verifier can be carried between them
        flow.autogenerate_code_verifier = False
        flow.code_verifier = None
        return flow

    def build_authorization_url(self, state: str) -> str:
        """
        Build the Google consent URL

        Args:
            state: Opaque value echoed back to the callback

        Returns:
            Authorization URL requesting offline access with forced consent
        """
        auth_url, _ = self._create_flow().authorization_url(
            access_type="offline",
            prompt="consent",
            state=state
        )
        return auth_url

    def exchange_code(self, code: str) -> Credential:
        """
        Exchange an authorization code for tokens and store them

        Args:
            code: Authorization code from the OAuth callback

        Returns:
            The stored credential

        Raises:
            ExchangeError: If the exchange fails; nothing is stored
        """
        if not code:
            raise ExchangeError("Missing authorization code")

        flow = self._create_flow()
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            logger.error(f"❌ Failed to exchange code for token: {e}")
            raise ExchangeError(f"failed to exchange code for token: {e}") from e

        credential = self._credentials_to_credential(flow.credentials)
        self.token_storage.set(credential)
        logger.info("✅ Successfully authenticated with Google and stored token in memory")
        return credential

    # ------------------------------------------------------------------
    # Authenticated clients
    # ------------------------------------------------------------------

    def is_authenticated(self) -> bool:
        """
        Check if a credential is held

        Only a cheap pre-check: expiry and refresh are re-checked
        whenever a client is requested.
        """
        return self.token_storage.exists()

    def get_authenticated_service(self) -> Resource:
        """
        Get an authenticated YouTube API client

        Refreshes the access token first if it is expired or about to
        expire, and stores the refreshed credential.

        Returns:
            googleapiclient YouTube v3 resource bound to the current token

        Raises:
            NotAuthenticatedError: If no credential is held or the refresh is rejected
        """
        credential = self.token_storage.get()
        if credential is None:
            raise NotAuthenticatedError()

        creds = self._credential_to_credentials(credential)

        if not creds.valid:
            try:
                creds.refresh(self._request_factory())
            except google.auth.exceptions.GoogleAuthError as e:
                logger.error(f"Failed to refresh token: {e}")
                raise NotAuthenticatedError(
                    f"Failed to retrieve or refresh Google token: {e}. "
                    "Please visit /oauth/authorize"
                ) from e

            refreshed = self._credentials_to_credential(creds)
            if refreshed.access_token != credential.access_token:
                if self.token_storage.replace_if(credential, refreshed):
                    logger.info("♻️ Google OAuth token was refreshed")
                else:
                    logger.info("Stored credential changed during refresh; keeping the newer one")

        return build(
            "youtube",
            "v3",
            credentials=creds,
            cache_discovery=False
        )

    # ------------------------------------------------------------------
    # Proactive refresh
    # ------------------------------------------------------------------

    def refresh_tick(self, stopped: Optional[threading.Event] = None) -> bool:
        """
        Refresh the stored token if it is invalid or expires within 30 minutes

        A failed refresh clears the stored credential so the user is sent
        back through the browser flow instead of keeping a dead token.
        Nothing is written if the stored credential changed while Google
        was being contacted, or if ``stopped`` was set meanwhile.

        Args:
            stopped: Set when the refresher is cancelled; the tick's result is then discarded

        Returns:
            True if a new credential was stored
        """
        credential = self.token_storage.get()
        if credential is None:
            return False

        creds = self._credential_to_credentials(credential)
        if creds.valid and not credential.expires_within(PROACTIVE_REFRESH_WINDOW_SECONDS):
            return False

        logger.info("Proactively refreshing token...")
        try:
            creds.refresh(self._request_factory())
        except google.auth.exceptions.GoogleAuthError as e:
            logger.error(f"Error refreshing token in background: {e}")
            if stopped is not None and stopped.is_set():
                return False
            if self.token_storage.replace_if(credential, None):
                logger.info("Stored credential cleared")
            return False

        if stopped is not None and stopped.is_set():
            logger.info("Refresher stopped during refresh; discarding result")
            return False

        if not self.token_storage.replace_if(credential, self._credentials_to_credential(creds)):
            logger.info("Stored credential changed during background refresh; keeping the newer one")
            return False

        logger.info("✅ Token proactively refreshed in the background")
        return True

    async def token_refresher(self, interval: float = REFRESH_INTERVAL_SECONDS):
        """
        Background loop running refresh_tick every ``interval`` seconds

        Runs until the task is cancelled. Cancellation stops waiting on an
        in-flight tick immediately; that tick still finishes in its worker
        thread but stores nothing.
        """
        logger.info("🔄 Background token refresher started")
        loop = asyncio.get_running_loop()
        stopped = threading.Event()
        try:
            while True:
                await asyncio.sleep(interval)
                await loop.run_in_executor(None, self.refresh_tick, stopped)
        except asyncio.CancelledError:
            stopped.set()
            logger.info("Background token refresher stopped")
            raise

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_token_info(self) -> Dict[str, Any]:
        """
        Get current token information

        Returns:
            Dictionary with token status and metadata (never the token itself)
        """
        credential = self.token_storage.get()
        if credential is None:
            return {
                'authenticated': False,
                'message': 'No credentials available'
            }

        expiry_str = None
        time_until_expiry = None

        if credential.expires_at:
            expiry_str = credential.expires_at.isoformat()
            time_until_expiry = (credential.expires_at - datetime.now(timezone.utc)).total_seconds()

        return {
            'authenticated': True,
            'valid': not credential.is_expired(),
            'expired': credential.is_expired(),
            'has_refresh_token': bool(credential.refresh_token),
            'expiry': expiry_str,
            'time_until_expiry_seconds': time_until_expiry,
            'scopes': list(credential.scopes)
        }

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def _credentials_to_credential(self, creds: Credentials) -> Credential:
        """Snapshot google-auth Credentials into an immutable Credential"""
        return Credential(
            access_token=creds.token,
            refresh_token=creds.refresh_token,
            expires_at=creds.expiry,
            scopes=tuple(creds.scopes or self.oauth_config.scopes)
        )

    def _credential_to_credentials(self, credential: Credential) -> Credentials:
        """Build fresh google-auth Credentials from a stored Credential"""
        expiry: Optional[datetime] = None
        if credential.expires_at is not None:
            # google-auth compares against naive UTC
            expiry = credential.expires_at.astimezone(timezone.utc).replace(tzinfo=None)

        return Credentials(
            token=credential.access_token,
            refresh_token=credential.refresh_token,
            token_uri=self.oauth_config.token_uri,
            client_id=self.oauth_config.client_id,
            client_secret=self.oauth_config.client_secret,
            scopes=list(credential.scopes) or None,
            expiry=expiry
        )
