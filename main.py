import json

from menus.auth_menu import auth_menu
from trakt_api.config import load_config, validate_config
from utils.logger import setup_logging, log_info, log_error, log_warning

if __name__ == "__main__":
    setup_logging()

    try:
        config = load_config()
    except FileNotFoundError as e:
        log_error(f"Config file not found: {e}")
        log_error("Please create config.json with at least trakt_client_id.")
        exit(1)
    except json.JSONDecodeError as e:
        log_error(f"Config file contains invalid JSON: {e}")
        exit(1)

    is_valid, errors = validate_config(config)
    if not is_valid:
        for error in errors:
            log_warning(error)

    auth_menu(config)
    log_info("Exiting program...")
