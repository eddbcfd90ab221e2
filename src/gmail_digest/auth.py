"""OAuth2 token lifecycle for the Gmail API."""

from __future__ import annotations

import logging
import queue
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable
from urllib.parse import parse_qs, urlparse
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from .config import OAuthClientConfig
from .constants import CALLBACK_HOST, CALLBACK_PATH, CALLBACK_PORT, CALLBACK_RESPONSE, SCOPES
from .display import print_auth_url, print_status
from .errors import TokenError, TokenNotFoundError
from .models import Token
from .token_store import TokenStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _QuietRequestHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.debug("callback listener: " + format, *args)


class CallbackListener:
    """Short-lived loopback HTTP server that receives one OAuth redirect.

    The server runs on a daemon thread and hands the query parameters of the
    first request to ``self.path`` over a one-item queue. Requests to any
    other path get a 404 and are otherwise ignored.
    """

    def __init__(
        self,
        host: str = CALLBACK_HOST,
        port: int = CALLBACK_PORT,
        path: str = CALLBACK_PATH,
    ) -> None:
        self.host = host
        self.port = port
        self.path = path
        self._params: queue.Queue[dict[str, str]] = queue.Queue(maxsize=1)
        self._server: WSGIServer | None = None
        self._thread: threading.Thread | None = None

    def _app(self, environ, start_response):  # noqa: ANN001
        headers = [("Content-Type", "text/plain; charset=utf-8")]
        if environ.get("PATH_INFO") != self.path:
            start_response("404 Not Found", headers)
            return [b"Not found"]

        query = parse_qs(environ.get("QUERY_STRING", ""))
        params = {key: values[0] for key, values in query.items()}
        try:
            self._params.put_nowait(params)
        except queue.Full:
            logger.debug("Ignoring repeated authorization callback")

        start_response("200 OK", headers)
        return [CALLBACK_RESPONSE.encode("utf-8")]

    def start(self) -> None:
        try:
            self._server = make_server(
                self.host, self.port, self._app, handler_class=_QuietRequestHandler
            )
        except OSError as exc:
            raise TokenError(
                f"Failed to start local server on {self.host}:{self.port}: {exc}"
            ) from exc

        self.port = self._server.server_port
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="oauth-callback", daemon=True
        )
        self._thread.start()
        logger.debug("Listening for the authorization callback on %s:%s", self.host, self.port)

    def wait(self) -> dict[str, str]:
        """Block until the callback arrives and return its query parameters."""
        return self._params.get()

    def close(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        self._server = None

    # --- context manager ---

    def __enter__(self) -> CallbackListener:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()


class TokenProvider:
    """Hands out a valid token, refreshing or re-authorizing as needed.

    Every token obtained from the provider (code exchange or refresh) is
    written back to the store before it is returned.
    """

    def __init__(
        self,
        client_config: OAuthClientConfig,
        store: TokenStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
        listener_factory: Callable[[], CallbackListener] = CallbackListener,
    ) -> None:
        self.client_config = client_config
        self.store = store if store is not None else TokenStore()
        self.clock = clock
        self.listener_factory = listener_factory

    def get_valid_token(self) -> tuple[Credentials, timedelta]:
        """Return credentials for the Gmail API and how long they stay valid.

        A missing or unreadable token file starts the interactive browser
        flow. An expired token is refreshed; a failed refresh raises
        TokenError rather than falling back to the browser flow.
        """
        try:
            token = self.store.load()
        except TokenNotFoundError as exc:
            logger.debug("%s; starting interactive authorization", exc)
            token = self._authorize()
            self.store.save(token)
            return self._wrap(token)

        if self._remaining(token) < timedelta(0):
            print_status("Token has expired. Refreshing...")
            token = self._refresh(token)
            self.store.save(token)

        return self._wrap(token)

    def _remaining(self, token: Token) -> timedelta:
        return token.expiry - self.clock()

    def _wrap(self, token: Token) -> tuple[Credentials, timedelta]:
        return token.to_credentials(self.client_config), self._remaining(token)

    def _refresh(self, token: Token) -> Token:
        creds = token.to_credentials(self.client_config)
        try:
            creds.refresh(Request())
            return Token.from_credentials(creds, previous=token)
        except (GoogleAuthError, ValueError) as exc:
            raise TokenError(f"Unable to refresh token: {exc}") from exc

    def _authorize(self) -> Token:
        flow = Flow.from_client_config(
            self.client_config.to_client_config(),
            scopes=SCOPES,
            redirect_uri=self.client_config.redirect_uri,
        )
        # offline access + consent so that a refresh token is always issued
        auth_url, state = flow.authorization_url(access_type="offline", prompt="consent")
        print_auth_url(auth_url, self.client_config.redirect_uri)

        with self.listener_factory() as listener:
            self._warn_on_redirect_mismatch(listener)
            params = listener.wait()

        code = _code_from_callback(params, state)
        try:
            flow.fetch_token(code=code)
            return Token.from_credentials(flow.credentials)
        except (OAuth2Error, GoogleAuthError, requests.RequestException, ValueError) as exc:
            raise TokenError(f"Unable to retrieve token from web: {exc}") from exc

    def _warn_on_redirect_mismatch(self, listener: CallbackListener) -> None:
        redirect = urlparse(self.client_config.redirect_uri)
        if redirect.port != listener.port or redirect.path != listener.path:
            logger.warning(
                "Redirect URI %s does not point at the local listener (port %s, path %s)",
                self.client_config.redirect_uri,
                listener.port,
                listener.path,
            )


def _code_from_callback(params: dict[str, str], expected_state: str) -> str:
    if "error" in params:
        raise TokenError(f"Authorization was denied: {params['error']}")
    if params.get("state") != expected_state:
        raise TokenError("Authorization callback state does not match the request")
    code = params.get("code")
    if not code:
        raise TokenError("Authorization callback carried no code")
    return code
