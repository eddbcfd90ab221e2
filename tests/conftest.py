"""Shared fixtures for tests."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from gmail_digest.config import OAuthClientConfig
from gmail_digest.models import Token

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def client_config() -> OAuthClientConfig:
    return OAuthClientConfig(
        client_id="client-123.apps.googleusercontent.com",
        client_secret="s3cret",
        redirect_uri="http://localhost:8080/oauth2callback",
    )


@pytest.fixture
def valid_token() -> Token:
    return Token(
        access_token="ya29.valid",
        refresh_token="1//refresh",
        expiry=NOW + timedelta(minutes=30),
    )


@pytest.fixture
def expired_token() -> Token:
    return Token(
        access_token="ya29.stale",
        refresh_token="1//refresh",
        expiry=NOW - timedelta(minutes=5),
    )


@pytest.fixture
def credentials_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(
        json.dumps(
            {
                "web": {
                    "client_id": "client-123.apps.googleusercontent.com",
                    "project_id": "digest",
                    "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                    "token_uri": "https://oauth2.googleapis.com/token",
                    "client_secret": "s3cret",
                    "redirect_uris": ["http://localhost:8080/oauth2callback"],
                }
            }
        )
    )
    return path


def _metadata_response(message_id: str, headers: dict[str, str] | list[tuple[str, str]]) -> dict:
    items = headers.items() if isinstance(headers, dict) else headers
    return {
        "id": message_id,
        "payload": {"headers": [{"name": name, "value": value} for name, value in items]},
    }


@pytest.fixture
def metadata_response():
    """Factory for users.messages.get(format='metadata') responses."""
    return _metadata_response
