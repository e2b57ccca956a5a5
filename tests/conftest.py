import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

# Cheap argon2 parameters for the test run; must be set before flowva.auth.passwords is imported.
os.environ.setdefault("FLOWVA_ARGON2_TIME_COST", "1")
os.environ.setdefault("FLOWVA_ARGON2_MEMORY_COST", "8192")

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from flowva.app import create_app
from flowva.auth.service import AuthService
from flowva.auth.session import TokenService
from flowva.config import Settings
from flowva.infra.db import Database
from flowva.infra.onboarding_repo import OnboardingStore
from flowva.infra.user_repo import CredentialStore

TEST_SECRET = "test-secret-key"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        secret_key=TEST_SECRET,
        database_url=f"sqlite:///{tmp_path / 'flowva.db'}",
    )


@pytest.fixture()
def database(settings):
    db = Database(settings.database_url)
    db.init_schema()
    yield db
    db.dispose()


@pytest.fixture()
def users(database) -> CredentialStore:
    return CredentialStore(database)


@pytest.fixture()
def onboarding_store(database) -> OnboardingStore:
    return OnboardingStore(database)


@pytest.fixture()
def tokens(settings) -> TokenService:
    return TokenService(settings.secret_key, max_age=settings.session_max_age)


@pytest.fixture()
def auth(users, tokens) -> AuthService:
    return AuthService(users, tokens)


@pytest.fixture()
def client(settings, database):
    app = create_app(settings, database)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def frozen_time(monkeypatch):
    """Pin time.time(); returns a setter so tests can move the clock."""
    import time

    state = {"now": 1_700_000_000.0}
    monkeypatch.setattr(time, "time", lambda: state["now"])

    def _set(value: float) -> None:
        state["now"] = float(value)

    _set.now = lambda: state["now"]
    return _set
