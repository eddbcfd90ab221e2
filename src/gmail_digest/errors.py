"""Exceptions raised by Gmail Digest.

Library code raises these and lets them propagate; the CLI is the only place
that turns them into a process exit.
"""

from __future__ import annotations


class GmailDigestError(Exception):
    """Base class for all Gmail Digest errors."""


class ConfigError(GmailDigestError):
    """Missing environment variable or unusable OAuth client credentials."""


class TokenError(GmailDigestError):
    """A token could not be obtained, exchanged or refreshed."""


class TokenNotFoundError(TokenError):
    """No stored token is available."""


class TokenDecodeError(TokenNotFoundError):
    """The stored token file exists but is not a valid token record."""


class TokenStoreError(TokenError):
    """The token file could not be written."""


class TransportError(GmailDigestError):
    """A Gmail API call failed."""

    def __init__(self, message: str, message_id: str | None = None) -> None:
        super().__init__(message)
        self.message_id = message_id
