import time
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AccessTokenResponse:
    """Token payload returned by the trakt authorization server."""

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None

    @staticmethod
    def from_token_response(payload: Dict[str, Any]) -> "AccessTokenResponse":
        """Convert token endpoint JSON into AccessTokenResponse.

        The server returns:
        - access_token
        - token_type (optional)
        - expires_in (seconds, optional)
        - refresh_token (optional)
        - scope (optional)
        """

        expires_in = payload.get("expires_in")
        try:
            expires_in = int(expires_in) if expires_in is not None else None
        except (TypeError, ValueError):
            expires_in = None

        return AccessTokenResponse(
            access_token=str(payload.get("access_token") or ""),
            refresh_token=payload.get("refresh_token"),
            expires_in=expires_in,
            token_type=payload.get("token_type"),
            scope=payload.get("scope"),
        )

    def expires_at(self, issued_at: Optional[float] = None) -> Optional[float]:
        """Absolute expiry timestamp, or None if the server sent no lifetime."""
        if self.expires_in is None:
            return None
        issued = float(time.time() if issued_at is None else issued_at)
        return issued + float(self.expires_in)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "token_type": self.token_type,
            "scope": self.scope,
        }
