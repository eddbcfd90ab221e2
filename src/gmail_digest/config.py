"""Loading of OAuth client credentials."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .constants import CREDENTIALS_ENV_VAR, GOOGLE_AUTH_URI, GOOGLE_TOKEN_URI
from .errors import ConfigError

logger = logging.getLogger(__name__)

_CLIENT_TYPES = ("web", "installed")


@dataclass(frozen=True)
class OAuthClientConfig:
    """Client id, secret and endpoints of a Google OAuth client."""

    client_id: str
    client_secret: str
    redirect_uri: str
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI

    def to_client_config(self) -> dict:
        """Return the structure google_auth_oauthlib expects."""
        return {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": [self.redirect_uri],
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
            }
        }


def credentials_path_from_env(environ: Mapping[str, str] | None = None) -> Path:
    """Return the credentials file path named by the environment."""
    environ = os.environ if environ is None else environ
    value = environ.get(CREDENTIALS_ENV_VAR, "").strip()
    if not value:
        raise ConfigError(f"{CREDENTIALS_ENV_VAR} environment variable not set")
    return Path(value)


def load_client_config(path: Path | str) -> OAuthClientConfig:
    """Parse a client secrets file downloaded from the Google Cloud Console.

    Both ``web`` and ``installed`` client types are accepted. The first
    redirect URI is used.
    """
    path = Path(path)
    try:
        raw = path.read_text()
    except OSError as exc:
        raise ConfigError(f"Unable to read credentials file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Unable to parse credentials file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Unable to parse credentials file {path}: expected a JSON object")

    section = next((data[key] for key in _CLIENT_TYPES if isinstance(data.get(key), dict)), None)
    if section is None:
        raise ConfigError(
            f"Credentials file {path} has no 'web' or 'installed' client section"
        )

    client_id = section.get("client_id")
    client_secret = section.get("client_secret")
    redirect_uris = section.get("redirect_uris") or []
    if not client_id or not client_secret:
        raise ConfigError(f"Credentials file {path} is missing client_id or client_secret")
    if not redirect_uris:
        raise ConfigError(f"Credentials file {path} lists no redirect_uris")

    logger.debug("Loaded OAuth client %s from %s", client_id, path)
    return OAuthClientConfig(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uris[0],
        auth_uri=section.get("auth_uri") or GOOGLE_AUTH_URI,
        token_uri=section.get("token_uri") or GOOGLE_TOKEN_URI,
    )
