"""Tests for the token file store."""

import json
import os
import stat
from datetime import datetime, timezone

import pytest

from gmail_digest.errors import TokenDecodeError, TokenNotFoundError, TokenStoreError
from gmail_digest.models import Token
from gmail_digest.token_store import TokenStore


def test_save_and_load(tmp_path, valid_token):
    store = TokenStore(tmp_path / "token.json")
    store.save(valid_token)

    loaded = store.load()
    assert loaded == valid_token
    assert loaded.expiry.tzinfo is not None


def test_saved_file_is_owner_only(tmp_path, valid_token):
    path = tmp_path / "token.json"
    path.write_text("old contents")
    os.chmod(path, 0o644)

    TokenStore(path).save(valid_token)

    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    data = json.loads(path.read_text())
    assert set(data) == {"access_token", "token_type", "refresh_token", "expiry"}


def test_load_missing_file(tmp_path):
    with pytest.raises(TokenNotFoundError):
        TokenStore(tmp_path / "missing.json").load()


@pytest.mark.parametrize(
    "contents",
    [
        "not json",
        "[]",
        '{"access_token": "a"}',
        '{"access_token": "a", "expiry": "tomorrow"}',
        '{"access_token": "a", "expiry": 12345}',
    ],
)
def test_load_malformed_file(tmp_path, contents):
    path = tmp_path / "token.json"
    path.write_text(contents)

    with pytest.raises(TokenDecodeError) as exc_info:
        TokenStore(path).load()

    # decode failures are handled the same way as a missing token
    assert isinstance(exc_info.value, TokenNotFoundError)
    assert path.read_text() == contents


def test_load_utc_suffix(tmp_path):
    path = tmp_path / "token.json"
    path.write_text(
        json.dumps(
            {
                "access_token": "ya29.a",
                "token_type": "Bearer",
                "refresh_token": "1//r",
                "expiry": "2024-01-01T10:00:00Z",
            }
        )
    )

    token = TokenStore(path).load()
    assert token.expiry == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_naive_expiry_is_utc():
    token = Token(access_token="a", refresh_token="r", expiry=datetime(2024, 1, 1, 10, 0))
    assert token.expiry == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_save_to_unwritable_location(tmp_path, valid_token):
    store = TokenStore(tmp_path / "no-such-dir" / "token.json")
    with pytest.raises(TokenStoreError):
        store.save(valid_token)


def test_save_reports_path_with_brackets(tmp_path, valid_token, capsys):
    path = tmp_path / "tokens[red].json"

    TokenStore(path).save(valid_token)

    assert f"Saving credential file to: {path}" in capsys.readouterr().out
    assert path.exists()
