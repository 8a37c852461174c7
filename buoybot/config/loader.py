"""YAML config loader and publisher credential loading."""

import json
import os
from pathlib import Path

import yaml

from buoybot.config.schema import BuoyBotConfig, PublisherCredentials

BEARER_TOKEN_ENV = "TWITTER_BEARER_TOKEN"


class CredentialsError(Exception):
    """Raised when no publisher credentials can be found."""


def load_config(path: str | Path) -> BuoyBotConfig:
    """Load and validate config from a YAML file. An empty file yields defaults."""
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return BuoyBotConfig(**raw)


def load_credentials(path: str | Path | None) -> PublisherCredentials:
    """Read publisher credentials from a JSON file.

    Falls back to the TWITTER_BEARER_TOKEN environment variable when the file
    is missing.
    """
    if path is not None and Path(path).exists():
        with open(path) as f:
            return PublisherCredentials(**json.load(f))

    token = os.environ.get(BEARER_TOKEN_ENV, "")
    if not token:
        raise CredentialsError(
            f"No credentials file at {path} and {BEARER_TOKEN_ENV} not set"
        )
    return PublisherCredentials(bearer_token=token)
