"""OAuth credential model shared by the token holder and the session manager."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator


class Credential(BaseModel):
    """Immutable OAuth token record for the single authenticated user.

    A new instance is produced for every exchange or refresh; instances
    are never modified after creation.

    Attributes:
        access_token: Opaque bearer token sent to the YouTube API.
        refresh_token: Opaque token used to mint new access tokens, if granted.
        expires_at: Timezone-aware UTC expiry of the access token.
        token_type: OAuth token type.
        scopes: Scopes granted with this token.
    """

    model_config = {"frozen": True}

    access_token: str = Field(repr=False)
    refresh_token: Optional[str] = Field(default=None, repr=False)
    expires_at: Optional[datetime] = None
    token_type: str = "Bearer"
    scopes: Tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("expires_at")
    @classmethod
    def _ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # google-auth hands out naive UTC datetimes
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    def is_expired(self) -> bool:
        """Return True if the access token's expiry has passed."""
        return self.expires_within(0)

    def expires_within(self, seconds: float) -> bool:
        """Return True if the access token expires within ``seconds``.

        A credential without an expiry is treated as never expiring.
        """
        if self.expires_at is None:
            return False
        return self.expires_at <= datetime.now(timezone.utc) + timedelta(seconds=seconds)

