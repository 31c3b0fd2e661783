from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "https://g.codefresh.io/api"
API_URL_ENV = "CODEFRESH_API_URL"
API_KEY_ENV = "CODEFRESH_API_KEY"


@dataclass(frozen=True)
class ClientConfig:
    api_url: str
    token: str


def load_env_config(*, use_dotenv: bool = True) -> ClientConfig:
    """Load the Codefresh API URL and token from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    api_url = os.getenv(API_URL_ENV, "").strip() or DEFAULT_API_URL
    token = os.getenv(API_KEY_ENV, "").strip()
    return ClientConfig(api_url=api_url, token=token)


def create_client_from_env(**kwargs):
    """Create a CodefreshClient from environment variables."""
    from .client import CodefreshClient

    config = load_env_config()
    if not config.token:
        raise ValueError(f"Missing {API_KEY_ENV} in environment.")
    return CodefreshClient.from_config(config, **kwargs)


__all__ = [
    "ClientConfig",
    "DEFAULT_API_URL",
    "load_env_config",
    "create_client_from_env",
]
