"""Shared builders for tests: settings with fast bcrypt, in-memory databases, API clients."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from linkshare.core.config import Settings
from linkshare.core.database import build_engine, build_session_factory
from linkshare.main import create_app
from linkshare.models import Base

TEST_JWT_SECRET = "test-secret-for-unit-tests"


def make_settings(**overrides: object) -> Settings:
    """Settings isolated from the environment's .env file, with cheap bcrypt."""
    values: dict[str, object] = {
        "DATABASE_URL": "sqlite://",
        "BCRYPT_ROUNDS": 4,
        "JWT_SECRET": TEST_JWT_SECRET,
        "SESSION_COOKIE_SECURE": False,
        "LOGIN_RATE_LIMIT": "10/minute",
        "SEED_ADMIN": True,
        "ADMIN_USERNAME": "admin",
        "ADMIN_PASSWORD": "admin",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database(settings: Settings) -> tuple[Engine, sessionmaker[Session]]:
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    return engine, build_session_factory(engine)


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory database and session per test."""

    settings_overrides: dict[str, object] = {}

    def setUp(self) -> None:
        self.settings = make_settings(**self.settings_overrides)
        self.engine, self.session_factory = make_database(self.settings)
        self.db = self.session_factory()
        self.addCleanup(self.engine.dispose)
        self.addCleanup(self.db.close)


class ApiTestCase(unittest.TestCase):
    """Runs the app (with lifespan, so tables and the admin exist) against an in-memory DB."""

    auth_mode = "token"
    settings_overrides: dict[str, object] = {}

    def setUp(self) -> None:
        self.settings = make_settings(AUTH_MODE=self.auth_mode, **self.settings_overrides)
        self.app = create_app(self.settings)
        self.client = TestClient(self.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def other_client(self) -> TestClient:
        """Second client on the same app with its own cookie jar (no lifespan)."""
        return TestClient(self.app)

    def register(self, username: str, password: str, client: TestClient | None = None):
        return (client or self.client).post(
            "/register", json={"username": username, "password": password}
        )

    def login(self, username: str, password: str, client: TestClient | None = None):
        return (client or self.client).post(
            "/login", json={"username": username, "password": password}
        )

    def bearer(self, username: str, password: str) -> dict[str, str]:
        """Log in (token mode) and return the Authorization header."""
        resp = self.login(username, password)
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['assertion']}"}
