"""Settings validation: bad values fail at startup instead of at request time."""

import unittest

from pydantic import ValidationError

from helpers import make_settings


class TestSettingsValidation(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        settings = make_settings()
        self.assertEqual(settings.AUTH_MODE, "token")
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 60)
        self.assertEqual(settings.SESSION_EXPIRE_HOURS, 24)
        self.assertEqual(settings.API_PREFIX, "")

    def test_rejects_invalid_values(self) -> None:
        bad = [
            {"DATABASE_URL": "mysql://localhost/db"},
            {"DATABASE_URL": "   "},
            {"JWT_SECRET": "   "},
            {"JWT_ALGORITHM": "RS256"},
            {"JWT_EXPIRE_MINUTES": 0},
            {"JWT_EXPIRE_MINUTES": 61},
            {"SESSION_EXPIRE_HOURS": 25},
            {"BCRYPT_ROUNDS": 3},
            {"AUTH_MODE": "both"},
            {"USERNAME_MIN_LEN": 10, "USERNAME_MAX_LEN": 5},
            {"LOGIN_RATE_LIMIT": "lots"},
            {"API_PREFIX": "api"},
            {"CONFLICT_STATUS_CODE": 418},
            {"LOG_LEVEL": "chatty"},
        ]
        for overrides in bad:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValidationError):
                    make_settings(**overrides)

    def test_prod_requires_real_secret(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(APP_ENV="prod", JWT_SECRET="change-me-in-production")
        self.assertEqual(make_settings(APP_ENV="prod").APP_ENV, "prod")

    def test_normalizes_values(self) -> None:
        settings = make_settings(API_PREFIX="/api/", LOG_LEVEL="debug")
        self.assertEqual(settings.API_PREFIX, "/api")
        self.assertEqual(settings.LOG_LEVEL, "DEBUG")


if __name__ == "__main__":
    unittest.main()
