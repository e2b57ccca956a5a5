import pytest

from flowva.config import SEVEN_DAYS, Settings


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "FLOWVA_ENV",
        "FLOWVA_SECRET_KEY",
        "SECRET_KEY",
        "FLOWVA_DATABASE_URL",
        "DATABASE_URL",
        "FLOWVA_SESSION_MAX_AGE",
        "FLOWVA_COOKIE_NAME",
        "FLOWVA_COOKIE_SECURE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_production_requires_secret(clean_env):
    clean_env.setenv("FLOWVA_ENV", "production")
    with pytest.raises(RuntimeError):
        Settings.from_env()


def test_development_gets_ephemeral_secret(clean_env):
    a = Settings.from_env()
    b = Settings.from_env()
    assert a.secret_key and b.secret_key
    assert a.secret_key != b.secret_key
    assert a.cookie_secure is False
    assert a.session_max_age == SEVEN_DAYS
    assert a.cookie_name == "token"


def test_production_settings(clean_env):
    clean_env.setenv("FLOWVA_ENV", "production")
    clean_env.setenv("FLOWVA_SECRET_KEY", "s3cret")
    clean_env.setenv("FLOWVA_DATABASE_URL", "sqlite:///tmp/x.db")
    s = Settings.from_env()
    assert s.is_production
    assert s.secret_key == "s3cret"
    assert s.cookie_secure is True
    assert s.database_url == "sqlite:///tmp/x.db"


def test_cookie_secure_override(clean_env):
    clean_env.setenv("FLOWVA_COOKIE_SECURE", "yes")
    assert Settings.from_env().cookie_secure is True
