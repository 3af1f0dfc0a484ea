import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .client import API_URL, TraktSession
from .errors import ConfigurationError
from .tokens import AccessTokenResponse

CONFIG_PATH = "config.json"

DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"

# Default configuration values
DEFAULT_CONFIG = {
    # OAuth 2.0 app credentials (from your trakt API app page)
    "trakt_client_id": "",
    "trakt_client_secret": "",
    "trakt_redirect_uri": DEFAULT_REDIRECT_URI,

    # NOTE: No default endpoints are shipped. Both must be set before the
    # OAuth flow can run.
    "trakt_authorization_url": "",
    "trakt_token_url": "",

    "trakt_api_url": API_URL,

    # Tokens obtained through the OAuth flow
    "trakt_access_token": "",
    "trakt_refresh_token": "",

    "trakt_debug": False,
    # None keeps httpx's default timeout.
    "trakt_timeout": None,
}

# Validation rules for config fields
CONFIG_SCHEMA = {
    "trakt_client_id": {"type": str, "required": True},
    "trakt_client_secret": {"type": str, "required": False},
    "trakt_redirect_uri": {"type": str, "required": False},
    "trakt_authorization_url": {"type": str, "required": False},
    "trakt_token_url": {"type": str, "required": False},
    "trakt_api_url": {"type": str, "required": False},
    "trakt_access_token": {"type": str, "required": False, "nullable": True},
    "trakt_refresh_token": {"type": str, "required": False, "nullable": True},
    "trakt_debug": {"type": bool, "required": False},
    "trakt_timeout": {"type": (int, float), "required": False, "nullable": True, "min": 0, "max": 600},
}


@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str
    redirect_uri: str


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from file, applying defaults for missing fields."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file {path} not found.")

    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)

    # Apply defaults for missing fields
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = value

    return config


def save_config(config: Dict[str, Any], path: str = CONFIG_PATH) -> bool:
    """Save configuration to file."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        raise IOError(f"Failed to save config: {e}") from e


def validate_config(config: Dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate configuration against schema.
    Returns (is_valid, list_of_errors).
    """
    errors = []

    for key, rules in CONFIG_SCHEMA.items():
        # Check required fields
        if rules.get("required", False) and key not in config:
            errors.append(f"Missing required field: {key}")
            continue

        if key not in config:
            continue

        value = config[key]

        if value is None and rules.get("nullable", False):
            continue

        # Type check (bool is an int subclass, so reject it for numeric fields)
        expected_type = rules.get("type")
        bad_bool = isinstance(value, bool) and expected_type is not bool
        if expected_type and (bad_bool or not isinstance(value, expected_type)):
            type_names = expected_type.__name__ if not isinstance(expected_type, tuple) else "/".join(t.__name__ for t in expected_type)
            errors.append(f"Field '{key}' must be {type_names}, got {type(value).__name__}")
            continue

        # Range check for numeric values
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if "min" in rules and value < rules["min"]:
                errors.append(f"Field '{key}' must be >= {rules['min']}, got {value}")
            if "max" in rules and value > rules["max"]:
                errors.append(f"Field '{key}' must be <= {rules['max']}, got {value}")

    return len(errors) == 0, errors


def check_trakt_credentials(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate trakt OAuth config fields and return a structured status dict."""

    config = config or {}
    missing = [
        key
        for key in (
            "trakt_client_id",
            "trakt_client_secret",
            "trakt_redirect_uri",
            "trakt_authorization_url",
            "trakt_token_url",
        )
        if not str(config.get(key) or "").strip()
    ]

    status = {
        "ok": not missing,
        "client_id": str(config.get("trakt_client_id") or "").strip(),
        "redirect_uri": str(config.get("trakt_redirect_uri") or "").strip(),
        "missing": missing,
        "has_access_token": bool(str(config.get("trakt_access_token") or "").strip()),
    }

    if missing:
        status["message"] = (
            f"Missing {', '.join(missing)} in config.json.\n"
            "Copy the client id, client secret and OAuth endpoints from your trakt API app page."
        )
    else:
        status["message"] = "trakt credentials look OK."

    return status


def credentials_from_config(config: Dict[str, Any]) -> Credentials:
    """Build Credentials from config, raising ConfigurationError on empty fields."""
    config = config or {}
    values = {}
    for field_name, key in (
        ("client_id", "trakt_client_id"),
        ("client_secret", "trakt_client_secret"),
        ("redirect_uri", "trakt_redirect_uri"),
    ):
        value = str(config.get(key) or "").strip()
        if not value:
            raise ConfigurationError(f"Missing {key} in config")
        values[field_name] = value
    return Credentials(**values)


def session_from_config(config: Dict[str, Any], *, transport: Optional[Any] = None) -> TraktSession:
    """Create a TraktSession from the stored token and debug flag."""
    config = config or {}
    return TraktSession(
        access_token=str(config.get("trakt_access_token") or "").strip() or None,
        is_debug=bool(config.get("trakt_debug", False)),
        api_url=str(config.get("trakt_api_url") or "").strip() or API_URL,
        timeout=config.get("trakt_timeout"),
        transport=transport,
    )


# Token response fields that are written back into config.json.
TOKEN_CONFIG_KEYS = {
    "access_token": "trakt_access_token",
    "refresh_token": "trakt_refresh_token",
}


def apply_token_response(config: Dict[str, Any], token: AccessTokenResponse) -> Dict[str, Any]:
    """Return a copy of config holding the tokens from a token response.

    A refresh response without a refresh_token keeps the stored one.
    """
    config = dict(config or {})
    values = token.to_dict()
    for field_name, key in TOKEN_CONFIG_KEYS.items():
        if values.get(field_name):
            config[key] = values[field_name]
    return config
