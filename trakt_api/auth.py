"""OAuth 2.0 token exchange against the trakt authorization server.

Usage:
  1. build_authorization_request(...) and send the user to its location_uri.
  2. trakt redirects to redirect_uri with ?code=...; pass that code to
     get_access_token(...).
  3. Hand the access token to TraktSession.set_access_token(...). Once it has
     expired, call refresh_access_token(...) with the refresh token.

The authorization and token endpoints ship empty. Pass them explicitly
(authorization_url= / token_url=) or through config.json; an empty endpoint
raises ConfigurationError.
"""

import logging
import urllib.parse
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from .errors import AuthProtocolError, ConfigurationError, TransportError
from .tokens import AccessTokenResponse

logger = logging.getLogger(__name__)

OAUTH2_AUTHORIZATION_URL = ""
OAUTH2_TOKEN_URL = ""

RESPONSE_TYPE_CODE = "code"


class GrantType(str, Enum):
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


def _require(value: Optional[str], name: str) -> str:
    value = str(value or "").strip()
    if not value:
        raise ConfigurationError(f"Missing {name}")
    return value


def _with_query(url: str, params: Dict[str, str]) -> str:
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{urllib.parse.urlencode(params)}"


@dataclass(frozen=True)
class AuthorizationRequest:
    authorization_url: str
    client_id: str
    redirect_uri: str
    response_type: str = RESPONSE_TYPE_CODE

    @property
    def params(self) -> Dict[str, str]:
        return {
            "response_type": self.response_type,
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
        }

    @property
    def location_uri(self) -> str:
        """Where to send the user to authorize the app."""
        return _with_query(self.authorization_url, self.params)


@dataclass(frozen=True)
class AccessTokenRequest:
    """Token endpoint request.

    For GrantType.REFRESH_TOKEN the refresh token travels in ``code``.
    """

    token_url: str
    grant_type: GrantType
    code: str
    redirect_uri: str
    client_id: str
    client_secret: str

    @property
    def params(self) -> Dict[str, str]:
        return {
            "grant_type": self.grant_type.value,
            "code": self.code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

    @property
    def location_uri(self) -> str:
        return _with_query(self.token_url, self.params)


def build_authorization_request(
    client_id: str,
    redirect_uri: str,
    *,
    authorization_url: Optional[str] = None,
) -> AuthorizationRequest:
    """Build an OAuth 2.0 authorization request to obtain an authorization code.

    Once the user authorized the app, the server redirects to ``redirect_uri``
    with the authorization code in the ``code`` query parameter. Supply it to
    get_access_token().
    """

    url = authorization_url if authorization_url is not None else OAUTH2_AUTHORIZATION_URL
    return AuthorizationRequest(
        authorization_url=_require(url, "OAuth2 authorization endpoint URL"),
        client_id=_require(client_id, "client_id"),
        redirect_uri=_require(redirect_uri, "redirect_uri"),
    )


def _build_token_request(
    grant_type: GrantType,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code: str,
    token_url: Optional[str],
) -> AccessTokenRequest:
    url = token_url if token_url is not None else OAUTH2_TOKEN_URL
    return AccessTokenRequest(
        token_url=_require(url, "OAuth2 token endpoint URL"),
        grant_type=grant_type,
        code=_require(code, "refresh_token" if grant_type is GrantType.REFRESH_TOKEN else "authorization code"),
        redirect_uri=_require(redirect_uri, "redirect_uri"),
        client_id=_require(client_id, "client_id"),
        client_secret=_require(client_secret, "client_secret"),
    )


def build_access_token_request(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    auth_code: str,
    *,
    token_url: Optional[str] = None,
) -> AccessTokenRequest:
    return _build_token_request(
        GrantType.AUTHORIZATION_CODE, client_id, client_secret, redirect_uri, auth_code, token_url
    )


def build_refresh_access_token_request(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    refresh_token: str,
    *,
    token_url: Optional[str] = None,
) -> AccessTokenRequest:
    return _build_token_request(
        GrantType.REFRESH_TOKEN, client_id, client_secret, redirect_uri, refresh_token, token_url
    )


def get_access_token(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    auth_code: str,
    *,
    token_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> AccessTokenResponse:
    """Request a new access token using an authorization code.

    On failure the app has to be re-authorized (see build_authorization_request).
    """

    request = build_access_token_request(client_id, client_secret, redirect_uri, auth_code, token_url=token_url)
    return execute_token_request(request, timeout=timeout, transport=transport)


def refresh_access_token(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    refresh_token: str,
    *,
    token_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> AccessTokenResponse:
    """Request a new access token using a refresh token issued with a past access token."""

    request = build_refresh_access_token_request(
        client_id, client_secret, redirect_uri, refresh_token, token_url=token_url
    )
    return execute_token_request(request, timeout=timeout, transport=transport)


def execute_token_request(
    request: AccessTokenRequest,
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> AccessTokenResponse:
    payload = _post_form(request.token_url, request.params, timeout=timeout, transport=transport)
    token = AccessTokenResponse.from_token_response(payload)
    if not token.access_token:
        raise AuthProtocolError("invalid_response", "token response carried no access_token")

    logger.info("Obtained trakt access token via %s grant", request.grant_type.value)
    return token


def _post_form(
    url: str,
    form: Dict[str, Any],
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> Dict[str, Any]:
    data = {k: str(v) for k, v in (form or {}).items() if v is not None}

    client_kwargs: Dict[str, Any] = {"follow_redirects": False}
    if timeout is not None:
        client_kwargs["timeout"] = timeout
    if transport is not None:
        client_kwargs["transport"] = transport

    try:
        with httpx.Client(**client_kwargs) as client:
            resp = client.post(
                url,
                data=data,
                headers={"Accept": "application/json"},
            )
    except httpx.TransportError as e:
        raise TransportError(f"trakt token request failed: {e}") from e

    try:
        payload = resp.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict) and payload.get("error"):
        raise AuthProtocolError(
            str(payload["error"]),
            payload.get("error_description"),
            status_code=resp.status_code,
        )

    if resp.status_code >= 400:
        raise AuthProtocolError("http_error", resp.text, status_code=resp.status_code)

    if not isinstance(payload, dict):
        raise AuthProtocolError(
            "invalid_response",
            f"token response was not a JSON object: {resp.text}",
            status_code=resp.status_code,
        )

    return payload


REDIRECT_FIELDS = ("code", "state", "error", "error_description")


def parse_redirect_url(redirect_url: str) -> Dict[str, str]:
    """Pull the OAuth callback fields out of the URL trakt redirected to.

    Returns whichever of code, state, error and error_description are present
    and non-empty. A bare query string ("?code=...") is accepted too.
    """

    query = urllib.parse.urlsplit(str(redirect_url or "").strip()).query
    params = httpx.QueryParams(query)
    return {key: params[key] for key in REDIRECT_FIELDS if params.get(key)}
