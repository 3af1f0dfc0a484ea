"""trakt API v2 client.

OAuth 2.0 token exchange lives in auth.py; TraktSession (client.py) holds the
access token and builds the REST adapter used for API calls.
"""

from .auth import (
    AccessTokenRequest,
    AuthorizationRequest,
    GrantType,
    build_access_token_request,
    build_authorization_request,
    build_refresh_access_token_request,
    get_access_token,
    refresh_access_token,
)
from .client import API_URL, RestAdapter, SessionConfig, TraktSession
from .config import Credentials
from .entities import ListItemsResponse, Response
from .enumerations import ImageSize
from .errors import AuthProtocolError, ConfigurationError, HttpStatusError, TraktError, TransportError
from .tokens import AccessTokenResponse

__all__ = [
    "API_URL",
    "AccessTokenRequest",
    "AccessTokenResponse",
    "AuthProtocolError",
    "AuthorizationRequest",
    "ConfigurationError",
    "Credentials",
    "GrantType",
    "HttpStatusError",
    "ImageSize",
    "ListItemsResponse",
    "Response",
    "RestAdapter",
    "SessionConfig",
    "TraktError",
    "TraktSession",
    "TransportError",
    "build_access_token_request",
    "build_authorization_request",
    "build_refresh_access_token_request",
    "get_access_token",
    "refresh_access_token",
]
