"""Shared pytest fixtures for the keysnipe test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from keysnipe.config import Config

# ── Environment isolation ──────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Keep real secrets and a developer's .env out of every test."""
    for name in ("DISCORD_TOKEN", "KRAMPUS_LOGIN", "KRAMPUS_PASSWORD", "VERBOSE", "KEYSNIPE_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


# ── Config ─────────────────────────────────────────────────────────────────


def base_config_dict(**overrides: Any) -> dict:
    raw = {
        "discord_token": "discord-token",
        "krampus_credentials": {"login": "sniper@example.com", "password": "hunter2"},
        "server_ids": [1234],
        "key_lengths": [4],
        "strict": False,
        "snipe_images": True,
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def make_config():
    """Build a Config from the default test dict plus overrides."""

    def _make(**overrides: Any) -> Config:
        return Config.from_dict(base_config_dict(**overrides))

    return _make


@pytest.fixture
def cfg(make_config) -> Config:
    return make_config()


# ── HTTP ───────────────────────────────────────────────────────────────────


def fake_response(payload: Any = None, cookies: dict | None = None, json_error: Exception | None = None):
    """A stand-in for ``requests.Response`` with a canned JSON body."""
    resp = MagicMock()
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    resp.cookies = cookies or {}
    return resp


@pytest.fixture
def session() -> MagicMock:
    """A mock ``requests.Session``."""
    return MagicMock()


@pytest.fixture
def make_response():
    """Factory fixture for fake ``requests.Response`` objects."""
    return fake_response
