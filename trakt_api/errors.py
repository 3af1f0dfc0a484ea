from typing import Optional


class TraktError(Exception):
    """Base class for errors raised by trakt_api."""


class ConfigurationError(TraktError):
    """A required endpoint or credential is missing or empty."""


class TransportError(TraktError):
    """Network or connection failure while talking to trakt."""


class AuthProtocolError(TraktError):
    """The authorization server answered with an OAuth error (or no usable token)."""

    def __init__(self, error: str, description: Optional[str] = None, *, status_code: Optional[int] = None):
        self.error = error
        self.description = description
        self.status_code = status_code
        message = error if not description else f"{error}: {description}"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)


class HttpStatusError(TraktError):
    """Non-2xx response from the trakt API, body left untouched."""

    def __init__(self, code: int, body: str):
        self.code = code
        self.body = body
        super().__init__(f"trakt API error {code}: {body}")
