"""Data models for Gmail Digest."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from google.oauth2.credentials import Credentials

from .constants import SCOPES

if TYPE_CHECKING:
    from .config import OAuthClientConfig


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Token:
    """OAuth2 token as persisted in the token file.

    ``expiry`` is always an absolute, timezone-aware UTC timestamp.
    """

    access_token: str
    refresh_token: str
    expiry: datetime
    token_type: str = "Bearer"

    def __post_init__(self) -> None:
        self.expiry = _as_utc(self.expiry)

    def to_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Token:
        """Build a Token from its JSON record.

        Raises KeyError, TypeError or ValueError when the record is malformed.
        """
        expiry = data["expiry"]
        if not isinstance(expiry, str):
            raise TypeError(f"expiry must be a string, got {type(expiry).__name__}")
        return cls(
            access_token=str(data["access_token"]),
            refresh_token=str(data.get("refresh_token") or ""),
            expiry=datetime.fromisoformat(expiry),
            token_type=str(data.get("token_type") or "Bearer"),
        )

    def to_credentials(self, client_config: OAuthClientConfig) -> Credentials:
        """Wrap the token as google-auth Credentials (naive UTC expiry)."""
        return Credentials(
            token=self.access_token,
            refresh_token=self.refresh_token or None,
            token_uri=client_config.token_uri,
            client_id=client_config.client_id,
            client_secret=client_config.client_secret,
            scopes=SCOPES,
            expiry=self.expiry.replace(tzinfo=None),
        )

    @classmethod
    def from_credentials(cls, creds: Credentials, previous: Token | None = None) -> Token:
        """Build a Token from Credentials after an exchange or refresh.

        The refresh token of ``previous`` is kept when the provider did not
        issue a new one.
        """
        if creds.expiry is None:
            raise ValueError("credentials carry no expiry")
        refresh_token = creds.refresh_token or (previous.refresh_token if previous else "")
        return cls(
            access_token=creds.token,
            refresh_token=refresh_token or "",
            expiry=creds.expiry,
        )


@dataclass(frozen=True)
class MessageHeaders:
    """Subject and raw From header of a single Gmail message."""

    message_id: str
    subject: str
    sender: str  # Full From header value


@dataclass(frozen=True)
class EmailInfo:
    """A message as it appears in a grouped report."""

    subject: str
    sender_name: str
    sender_email: str


# domain -> raw From header -> messages in arrival order
GroupedReport = dict[str, dict[str, list[EmailInfo]]]
