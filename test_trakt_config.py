import json
import os
import tempfile
import unittest

# Ensure local imports work when running this file directly.
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
if THIS_DIR not in os.sys.path:
    os.sys.path.insert(0, THIS_DIR)

from trakt_api.client import API_URL
from trakt_api.config import (
    DEFAULT_CONFIG,
    Credentials,
    apply_token_response,
    check_trakt_credentials,
    credentials_from_config,
    load_config,
    save_config,
    session_from_config,
    validate_config,
)
from trakt_api.entities import ListItemsResponse, Response
from trakt_api.enumerations import ImageSize
from trakt_api.errors import ConfigurationError
from trakt_api.tokens import AccessTokenResponse

FULL_CONFIG = {
    "trakt_client_id": "cid",
    "trakt_client_secret": "secret",
    "trakt_redirect_uri": "http://127.0.0.1:8888/callback",
    "trakt_authorization_url": "https://trakt.example/oauth/authorize",
    "trakt_token_url": "https://trakt.example/oauth/token",
}


class TestConfigFile(unittest.TestCase):
    def test_load_applies_defaults_and_save_roundtrips(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "config.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"trakt_client_id": "cid"}, f)

            config = load_config(path)
            self.assertEqual(config["trakt_client_id"], "cid")
            self.assertEqual(config["trakt_api_url"], API_URL)
            self.assertEqual(config["trakt_token_url"], "")
            self.assertIsNone(config["trakt_timeout"])

            config["trakt_access_token"] = "abc123"
            self.assertTrue(save_config(config, path))
            self.assertEqual(load_config(path)["trakt_access_token"], "abc123")

    def test_missing_file_raises(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_config(os.path.join(td, "missing.json"))


class TestConfigValidation(unittest.TestCase):
    def test_defaults_are_valid(self):
        ok, errors = validate_config(dict(DEFAULT_CONFIG))
        self.assertTrue(ok, errors)

    def test_type_and_range_errors_are_reported(self):
        config = dict(DEFAULT_CONFIG, trakt_debug="yes", trakt_timeout=-1)
        ok, errors = validate_config(config)
        self.assertFalse(ok)
        self.assertTrue(any("trakt_debug" in e for e in errors))
        self.assertTrue(any("trakt_timeout" in e for e in errors))

    def test_bool_is_not_a_timeout(self):
        ok, errors = validate_config(dict(DEFAULT_CONFIG, trakt_timeout=True))
        self.assertFalse(ok)

    def test_missing_client_id_is_reported(self):
        config = dict(DEFAULT_CONFIG)
        del config["trakt_client_id"]
        ok, errors = validate_config(config)
        self.assertFalse(ok)
        self.assertIn("Missing required field: trakt_client_id", errors)


class TestCredentials(unittest.TestCase):
    def test_check_reports_missing_endpoints(self):
        status = check_trakt_credentials(dict(DEFAULT_CONFIG, trakt_client_id="cid"))
        self.assertFalse(status["ok"])
        self.assertIn("trakt_authorization_url", status["missing"])
        self.assertIn("trakt_token_url", status["missing"])
        self.assertIn("trakt_client_secret", status["missing"])

    def test_check_ok_for_full_config(self):
        status = check_trakt_credentials(FULL_CONFIG)
        self.assertTrue(status["ok"])
        self.assertFalse(status["has_access_token"])

    def test_credentials_from_config(self):
        self.assertEqual(
            credentials_from_config(FULL_CONFIG),
            Credentials(client_id="cid", client_secret="secret", redirect_uri="http://127.0.0.1:8888/callback"),
        )
        with self.assertRaises(ConfigurationError):
            credentials_from_config(dict(FULL_CONFIG, trakt_client_secret=""))

    def test_apply_token_response_writes_tokens_into_copy(self):
        config = dict(FULL_CONFIG, trakt_refresh_token="old-refresh")

        updated = apply_token_response(config, AccessTokenResponse(access_token="abc123", refresh_token="r1"))
        self.assertEqual(updated["trakt_access_token"], "abc123")
        self.assertEqual(updated["trakt_refresh_token"], "r1")
        self.assertNotIn("trakt_access_token", config)

        refreshed = apply_token_response(updated, AccessTokenResponse(access_token="xyz789"))
        self.assertEqual(refreshed["trakt_access_token"], "xyz789")
        self.assertEqual(refreshed["trakt_refresh_token"], "r1")

    def test_session_from_config(self):
        session = session_from_config(dict(DEFAULT_CONFIG, trakt_access_token="abc123", trakt_debug=True))
        self.assertEqual(session.config.access_token, "abc123")
        self.assertTrue(session.config.is_debug)
        self.assertEqual(session.api_url, API_URL)

        anonymous = session_from_config(dict(DEFAULT_CONFIG))
        self.assertIsNone(anonymous.config.access_token)


class TestEntities(unittest.TestCase):
    def test_list_items_response_maps_json_keys(self):
        payload = {
            "status": "success",
            "inserted": 2,
            "already_exist": 1,
            "skipped": 1,
            "skipped_array": [{"type": "show", "title": "Unknown"}],
        }
        response = ListItemsResponse.from_dict(payload)
        self.assertTrue(response.is_success)
        self.assertEqual(response.inserted, 2)
        self.assertEqual(response.already_exist, 1)
        self.assertEqual(response.skipped, 1)
        self.assertEqual(response.skipped_array, [{"type": "show", "title": "Unknown"}])

    def test_failure_response(self):
        response = Response.from_dict({"status": "failure", "error": "list not found"})
        self.assertFalse(response.is_success)
        self.assertEqual(response.error, "list not found")
        self.assertEqual(ListItemsResponse.from_dict({}).skipped_array, [])

    def test_image_sizes(self):
        self.assertEqual(ImageSize.UNCOMPRESSED, "uncompressed")
        self.assertEqual(ImageSize.POSTERS_300, "-300")
        self.assertEqual(ImageSize.FANART_218, ImageSize.EPISODES_218)


if __name__ == "__main__":
    unittest.main(verbosity=2)
