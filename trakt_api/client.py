import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .errors import HttpStatusError, TraktError, TransportError

logger = logging.getLogger(__name__)

# trakt API v2 URL.
API_URL = "https://beta-api.trakt.tv"


@dataclass(frozen=True)
class SessionConfig:
    access_token: Optional[str] = None
    is_debug: bool = False


def _log_request(request: httpx.Request) -> None:
    body = request.read()
    logger.info(
        "---> HTTP %s %s\n%s\n%s\n---> END HTTP (%d-byte body)",
        request.method,
        request.url,
        "\n".join(f"{k}: {v}" for k, v in request.headers.items()),
        body.decode("utf-8", errors="replace"),
        len(body),
    )


def _log_response(response: httpx.Response) -> None:
    body = response.read()
    logger.info(
        "<--- HTTP %s %s\n%s\n%s\n<--- END HTTP (%d-byte body)",
        response.status_code,
        response.request.url,
        "\n".join(f"{k}: {v}" for k, v in response.headers.items()),
        body.decode("utf-8", errors="replace"),
        len(body),
    )


class RestAdapter:
    """httpx client bound to the trakt API URL.

    Every outgoing request carries ``access_token=<token>`` in its query
    string, using the token this adapter was built with. An ``access_token``
    passed by the caller is replaced by that token. Redirects are followed.
    With ``is_debug`` the full request and response (headers and bodies) are
    logged.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        api_url: str = API_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self.api_url = api_url

        event_hooks: Dict[str, list] = {"request": [self._append_access_token], "response": []}
        if config.is_debug:
            event_hooks["request"].append(_log_request)
            event_hooks["response"].append(_log_response)

        client_kwargs: Dict[str, Any] = {
            "base_url": api_url,
            "event_hooks": event_hooks,
            "headers": {"Accept": "application/json"},
            "follow_redirects": True,
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self.http = httpx.Client(**client_kwargs)

    def _append_access_token(self, request: httpx.Request) -> None:
        # No token: send the request unauthenticated.
        if self.config.access_token:
            request.url = request.url.copy_set_param("access_token", self.config.access_token)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> httpx.Response:
        """Issue a request against the API URL.

        Raises HttpStatusError for any non-2xx answer and TransportError when
        the request never got one.
        """

        if params:
            params = {k: str(v) for k, v in params.items() if v is not None}

        try:
            resp = self.http.request(method.upper(), path, params=params or None, json=json)
        except httpx.TransportError as e:
            raise TransportError(f"trakt API request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise HttpStatusError(resp.status_code, resp.text)
        return resp

    def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self.request(method, path, **kwargs)
        if not resp.content:
            return {}

        try:
            return resp.json()
        except ValueError as e:
            raise TraktError(f"trakt API response was not JSON (status {resp.status_code}): {resp.text}") from e

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request_json("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request_json("POST", path, **kwargs)

    def close(self) -> None:
        self.http.close()


class TraktSession:
    """Holds the access token and debug flag, and hands out a RestAdapter.

    Re-use one session instead of creating new ones. The adapter is built on
    first use and cached; any setter call discards it so the next
    get_adapter() builds a fresh one from the new settings. Adapters handed
    out earlier keep the settings they were built with.

    Setters are not synchronized with each other. get_adapter() builds at most
    one adapter per configuration change even when called from several threads.

    Setters drop the cached adapter without closing it, since callers may still
    hold it. Close adapters you keep (RestAdapter.close) once you are done
    with them; close() on the session only closes the current one.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        is_debug: bool = False,
        *,
        api_url: str = API_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._access_token = access_token
        self._is_debug = bool(is_debug)
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

        self._adapter: Optional[RestAdapter] = None
        self._lock = threading.Lock()

    # -----------------
    # Configuration
    # -----------------

    @property
    def config(self) -> SessionConfig:
        return SessionConfig(access_token=self._access_token, is_debug=self._is_debug)

    def set_access_token(self, token: Optional[str]) -> "TraktSession":
        """Set the OAuth 2.0 access token appended to every request.

        If set, some endpoints return user-specific data.
        """
        with self._lock:
            self._access_token = token
            self._adapter = None
        return self

    def set_is_debug(self, is_debug: bool) -> "TraktSession":
        """Log full requests and responses from adapters built after this call."""
        with self._lock:
            self._is_debug = bool(is_debug)
            self._adapter = None
        return self

    # -----------------
    # Adapter
    # -----------------

    def get_adapter(self) -> RestAdapter:
        """Return the cached adapter, building one first if settings changed."""
        with self._lock:
            if self._adapter is None:
                config = self.config
                logger.debug("Building trakt REST adapter for %s (debug=%s)", self.api_url, config.is_debug)
                self._adapter = RestAdapter(
                    config,
                    api_url=self.api_url,
                    timeout=self.timeout,
                    transport=self.transport,
                )
            return self._adapter

    def close(self) -> None:
        with self._lock:
            if self._adapter is not None:
                self._adapter.close()
                self._adapter = None

    def __enter__(self) -> "TraktSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
