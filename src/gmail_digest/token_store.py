"""Flat-file persistence for the OAuth token."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .constants import TOKEN_FILE_MODE, TOKEN_PATH
from .display import print_status
from .errors import TokenDecodeError, TokenNotFoundError, TokenStoreError
from .models import Token

logger = logging.getLogger(__name__)


class TokenStore:
    """Reads and writes a single token file."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else TOKEN_PATH

    def load(self) -> Token:
        """Return the stored token.

        Raises TokenNotFoundError when the file is missing and
        TokenDecodeError when it is not a valid token record.
        """
        try:
            raw = self.path.read_text()
        except FileNotFoundError as exc:
            raise TokenNotFoundError(f"No token file at {self.path}") from exc
        except OSError as exc:
            raise TokenNotFoundError(f"Unable to read token file {self.path}: {exc}") from exc

        try:
            token = Token.from_dict(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise TokenDecodeError(f"Unable to decode token file {self.path}: {exc}") from exc

        logger.debug("Loaded token from %s (expires %s)", self.path, token.expiry.isoformat())
        return token

    def save(self, token: Token) -> None:
        """Write the token, creating or truncating the file with owner-only access."""
        print_status(f"Saving credential file to: {self.path}")
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, TOKEN_FILE_MODE)
            with os.fdopen(fd, "w") as f:
                json.dump(token.to_dict(), f)
                f.write("\n")
            # os.open only applies the mode to newly created files
            os.chmod(self.path, TOKEN_FILE_MODE)
        except OSError as exc:
            raise TokenStoreError(f"Unable to cache oauth token at {self.path}: {exc}") from exc
