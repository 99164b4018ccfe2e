"""
Settings loading from the environment and the .env file.
"""

import pytest

from app.config.settings import Settings, DEFAULT_SECRET_KEY


@pytest.fixture(autouse=True)
def clean_secret_env(monkeypatch):
    monkeypatch.delenv("ACCESS_TOKEN_SECRET", raising=False)
    monkeypatch.delenv("SECRET_KEY", raising=False)


def test_access_token_secret_from_environment(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "from-environment")

    assert Settings(_env_file=None).secret_key == "from-environment"


def test_access_token_secret_from_dotenv(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ACCESS_TOKEN_SECRET=from-dotenv-secret\n")

    assert Settings(_env_file=str(env_file)).secret_key == "from-dotenv-secret"


def test_secret_key_name_is_still_accepted(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "legacy-name")

    assert Settings(_env_file=None).secret_key == "legacy-name"


def test_default_secret_when_nothing_is_set():
    assert Settings(_env_file=None).secret_key == DEFAULT_SECRET_KEY
