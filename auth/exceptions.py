"""
OAuth error types raised by the session manager
"""


class OAuthError(Exception):
    """Base class for Google OAuth failures"""
    pass


class ExchangeError(OAuthError):
    """Authorization code could not be exchanged for a token"""
    pass


class NotAuthenticatedError(OAuthError):
    """No usable credential: the browser flow has not completed or the refresh was rejected"""

    def __init__(self, message: str = None):
        super().__init__(
            message or "Not authenticated with Google; please visit /oauth/authorize"
        )
