import webbrowser

import questionary

from trakt_api.auth import (
    build_authorization_request,
    parse_redirect_url,
    get_access_token,
    refresh_access_token,
)
from trakt_api.config import apply_token_response, check_trakt_credentials, credentials_from_config, save_config
from trakt_api.errors import TraktError
from utils.logger import log_error, log_info, log_success, log_warning


def auth_menu(config: dict, *, transport=None) -> dict:
    """
    Display the trakt authorization menu.
    Returns the potentially updated config dict (with new tokens).
    """
    while True:
        choice = questionary.select(
            "🔑 trakt Auth Menu — What would you like to do?",
            choices=[
                "Check credentials",
                "Authorize this app",
                "Refresh access token",
                "Back",
            ],
        ).ask()

        if choice == "Check credentials":
            show_credentials_status(config)

        elif choice == "Authorize this app":
            config = authorize_menu(config, transport=transport)

        elif choice == "Refresh access token":
            config = refresh_menu(config, transport=transport)

        elif choice == "Back" or choice is None:
            break

    return config


def show_credentials_status(config: dict) -> dict:
    status = check_trakt_credentials(config)
    if status["ok"]:
        log_success(status["message"])
    else:
        log_warning(status["message"])
    log_info(f"Access token stored: {'yes' if status['has_access_token'] else 'no'}")
    return status


def parse_code_input(raw: str) -> str:
    """Accept either a pasted redirect URL or the bare authorization code."""
    raw = str(raw or "").strip()
    if "://" in raw or raw.startswith("?"):
        parsed = parse_redirect_url(raw)
        if parsed.get("error"):
            reason = parsed.get("error_description") or parsed["error"]
            raise TraktError(f"Authorization was denied: {reason}")
        return parsed.get("code", "")
    return raw


def authorize_menu(config: dict, *, transport=None) -> dict:
    """Walk through the authorization code flow and store the resulting tokens."""
    try:
        credentials = credentials_from_config(config)
        request = build_authorization_request(
            credentials.client_id,
            credentials.redirect_uri,
            authorization_url=config.get("trakt_authorization_url", ""),
        )
    except TraktError as e:
        log_error(str(e))
        return config

    log_info(f"Open this URL and authorize the app:\n{request.location_uri}")
    if questionary.confirm("Open it in your browser?", default=True).ask():
        webbrowser.open(request.location_uri)

    raw = questionary.text("Paste the redirect URL (or just the code):").ask()
    try:
        code = parse_code_input(raw)
        if not code:
            log_warning("No authorization code given.")
            return config

        token = get_access_token(
            credentials.client_id,
            credentials.client_secret,
            credentials.redirect_uri,
            code,
            token_url=config.get("trakt_token_url", ""),
            timeout=config.get("trakt_timeout"),
            transport=transport,
        )
    except TraktError as e:
        log_error(f"Authorization failed: {e}")
        return config

    log_success("Obtained a trakt access token.")
    return _store_tokens(config, token)


def refresh_menu(config: dict, *, transport=None) -> dict:
    refresh_token = str(config.get("trakt_refresh_token") or "").strip()
    if not refresh_token:
        log_warning("No refresh token stored. Authorize the app first.")
        return config

    try:
        credentials = credentials_from_config(config)
        token = refresh_access_token(
            credentials.client_id,
            credentials.client_secret,
            credentials.redirect_uri,
            refresh_token,
            token_url=config.get("trakt_token_url", ""),
            timeout=config.get("trakt_timeout"),
            transport=transport,
        )
    except TraktError as e:
        log_error(f"Token refresh failed: {e}")
        log_info("Re-authorize the app to get a new token.")
        return config

    log_success("Refreshed the trakt access token.")
    return _store_tokens(config, token)


def _store_tokens(config: dict, token) -> dict:
    config = apply_token_response(config, token)

    if questionary.confirm("Save tokens to config.json?", default=True).ask():
        try:
            save_config(config)
            log_success("Tokens saved.")
        except IOError as e:
            log_error(str(e))
    return config
