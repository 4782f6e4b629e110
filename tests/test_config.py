"""Unit tests for app.core.config: required secrets, environment aliases, URL and expiry validation."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from app.core.config import Settings

BASE_ENV = {
    "DATABASE_URL": "postgresql://u:p@localhost:5432/users",
    "JWT_ACCESS_SECRET": "access-secret-0123456789abcdef0123",
    "JWT_REFRESH_SECRET": "refresh-secret-0123456789abcdef012",
}


def _settings(**env: str | None) -> Settings:
    """Build Settings from exactly the given environment (no .env file)."""
    values = {**BASE_ENV, **env}
    values = {k: v for k, v in values.items() if v is not None}
    with patch.dict(os.environ, values, clear=True):
        return Settings(_env_file=None)


class TestDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = _settings()
        self.assertEqual(settings.JWT_ACCESS_EXPIRES, "15m")
        self.assertEqual(settings.JWT_REFRESH_EXPIRES, "7d")
        self.assertEqual(settings.PORT, 3000)
        self.assertEqual(settings.APP_ENV, "dev")
        self.assertFalse(settings.cookie_secure)
        self.assertEqual(settings.auth_cookie_path, "/api/auth")


class TestRequiredVariables(unittest.TestCase):
    """Missing secrets or database URL fail settings construction."""

    def test_missing_access_secret(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_ACCESS_SECRET=None)

    def test_missing_refresh_secret(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_REFRESH_SECRET=None)

    def test_blank_secret(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_ACCESS_SECRET="   ")

    def test_missing_database_url(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL=None)


class TestEnvironment(unittest.TestCase):
    """NODE_ENV is honoured; production turns on the Secure cookie flag."""

    def test_node_env_production(self) -> None:
        settings = _settings(NODE_ENV="production")
        self.assertEqual(settings.APP_ENV, "prod")
        self.assertTrue(settings.cookie_secure)

    def test_node_env_development(self) -> None:
        self.assertEqual(_settings(NODE_ENV="development").APP_ENV, "dev")

    def test_app_env_wins_over_node_env(self) -> None:
        self.assertEqual(_settings(APP_ENV="dev", NODE_ENV="production").APP_ENV, "dev")


class TestValidation(unittest.TestCase):
    def test_postgres_scheme_is_normalized(self) -> None:
        settings = _settings(DATABASE_URL="postgres://u:p@db:5432/users")
        self.assertEqual(settings.DATABASE_URL, "postgresql://u:p@db:5432/users")

    def test_non_postgres_url_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://u:p@db/users")

    def test_expiry_format(self) -> None:
        self.assertEqual(_settings(JWT_ACCESS_EXPIRES="30S").JWT_ACCESS_EXPIRES, "30s")
        for bad in ("fifteen", "0m", "15x"):
            with self.subTest(value=bad):
                with self.assertRaises(ValidationError):
                    _settings(JWT_REFRESH_EXPIRES=bad)

    def test_port_range(self) -> None:
        self.assertEqual(_settings(PORT="8080").PORT, 8080)
        with self.assertRaises(ValidationError):
            _settings(PORT="70000")
