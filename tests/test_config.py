import pytest

from codefresh_sync.client import CodefreshClient
from codefresh_sync.config import (
    DEFAULT_API_URL,
    ClientConfig,
    create_client_from_env,
    load_env_config,
)


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch):
    # Prevent load_dotenv from repopulating values from a local .env
    monkeypatch.setattr("codefresh_sync.config.load_dotenv", lambda *a, **k: None)


def test_create_client_from_env_missing_token(monkeypatch):
    monkeypatch.delenv("CODEFRESH_API_KEY", raising=False)

    with pytest.raises(ValueError) as exc:
        create_client_from_env()

    assert "Missing CODEFRESH_API_KEY" in str(exc.value)


def test_api_url_defaults_to_public_endpoint(monkeypatch):
    monkeypatch.delenv("CODEFRESH_API_URL", raising=False)
    monkeypatch.setenv("CODEFRESH_API_KEY", "tok")

    config = load_env_config()

    assert config == ClientConfig(api_url=DEFAULT_API_URL, token="tok")


def test_api_url_override(monkeypatch):
    monkeypatch.setenv("CODEFRESH_API_URL", " https://cf.example.com/api ")
    monkeypatch.setenv("CODEFRESH_API_KEY", "tok")

    with create_client_from_env() as client:
        assert isinstance(client, CodefreshClient)
        assert client.host == "https://cf.example.com/api"


def test_from_config_strips_trailing_slash():
    with CodefreshClient.from_config(
        ClientConfig(api_url="https://cf.test/api/", token="t")
    ) as client:
        assert client.host == "https://cf.test/api"
