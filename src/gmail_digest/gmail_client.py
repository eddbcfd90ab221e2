"""Gmail API client functions for listing messages and reading headers."""

from __future__ import annotations

import logging

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError

from gmail_digest.constants import METADATA_HEADERS
from gmail_digest.errors import TransportError
from gmail_digest.models import MessageHeaders

logger = logging.getLogger(__name__)

# API, transport, socket and in-request token refresh failures
_API_ERRORS = (HttpError, httplib2.HttpLib2Error, OSError, GoogleAuthError)


def build_service(credentials: Credentials) -> Resource:
    """Return a Gmail API service object using the given credentials."""
    return build("gmail", "v1", credentials=credentials, cache_discovery=False)


def _extract_headers(response: dict, names: list[str]) -> dict[str, str]:
    """Pick the requested headers from a metadata response.

    Names match case-insensitively, the first occurrence of a header wins and
    a missing header maps to an empty string.
    """
    wanted = {name.lower(): name for name in names}
    found: dict[str, str] = {}
    for h in response.get("payload", {}).get("headers", []):
        name = wanted.get(h.get("name", "").lower())
        if name is not None and name not in found:
            found[name] = h.get("value", "")
    return {name: found.get(name, "") for name in names}


def _get_metadata(service, message_id: str, headers: list[str]) -> dict:
    try:
        return (
            service.users()
            .messages()
            .get(userId="me", id=message_id, format="metadata", metadataHeaders=headers)
            .execute()
        )
    except _API_ERRORS as exc:
        raise TransportError(
            f"Unable to retrieve message {message_id}: {exc}", message_id=message_id
        ) from exc


def list_message_ids(service, query: str) -> list[str]:
    """List the IDs of messages matching the query.

    Only the first page of results is read.
    """
    try:
        resp = service.users().messages().list(userId="me", q=query).execute()
    except _API_ERRORS as exc:
        raise TransportError(f"Unable to retrieve messages: {exc}") from exc

    ids = [msg["id"] for msg in resp.get("messages", [])]
    logger.debug("Query %r matched %d messages", query, len(ids))
    return ids


def fetch_subject(service, message_id: str) -> str:
    """Return only the Subject header of a message."""
    response = _get_metadata(service, message_id, ["Subject"])
    return _extract_headers(response, ["Subject"])["Subject"]


def fetch_message_headers(service, message_id: str) -> MessageHeaders:
    """Return the Subject and raw From header of a message."""
    response = _get_metadata(service, message_id, METADATA_HEADERS)
    headers = _extract_headers(response, METADATA_HEADERS)
    return MessageHeaders(
        message_id=message_id,
        subject=headers["Subject"],
        sender=headers["From"],
    )


def get_profile_email(service) -> str:
    """Return the address of the authenticated mailbox."""
    try:
        profile = service.users().getProfile(userId="me").execute()
    except _API_ERRORS as exc:
        raise TransportError(f"Unable to retrieve profile: {exc}") from exc
    return profile.get("emailAddress", "")
