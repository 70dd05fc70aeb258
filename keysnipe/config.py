"""Configuration loading (config.json, with .env / environment overrides for secrets)"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

from dotenv import dotenv_values

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_API_URL = "https://api.acedia.gg"
DEFAULT_ORIGIN = "https://acedia.gg"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"

AUTH_FAILURE_POLICIES = ("exit", "retry")


class ConfigError(Exception):
    """Raised when the configuration file is missing or malformed"""


@dataclass(frozen=True)
class Config:
    """Immutable runtime configuration, shared read-only by every task"""
    discord_token: str
    login: str
    password: str
    server_ids: FrozenSet[int]
    key_lengths: FrozenSet[int]
    strict: bool = False
    snipe_images: bool = False

    # Runtime Configuration
    ignore_urls: bool = True
    batch_keys: bool = True
    auth_interval: float = 300.0
    auth_failure_policy: str = "exit"
    max_workers: int = 16
    connection_timeout: float = 10.0
    read_timeout: float = 30.0
    max_retries: int = 3
    api_url: str = DEFAULT_API_URL
    origin: str = DEFAULT_ORIGIN
    user_agent: str = USER_AGENT
    verbose: bool = False

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None, env_file: Union[str, Path] = ".env") -> "Config":
        """Read config.json and apply environment overrides"""
        path = Path(path or os.environ.get("KEYSNIPE_CONFIG", DEFAULT_CONFIG_PATH))

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ConfigError(f"{path} not found")
        except (OSError, ValueError) as e:
            raise ConfigError(f"could not parse {path}: {e}")

        if not isinstance(raw, dict):
            raise ConfigError(f"{path} must contain a JSON object")

        # .env file first, then environment variables, then the JSON file
        env_config = dotenv_values(env_file) if Path(env_file).exists() else {}
        return cls.from_dict(raw, env_config)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], env_config: Optional[Dict[str, Optional[str]]] = None) -> "Config":
        env = _Env(env_config or {})

        credentials = raw.get("krampus_credentials") or {}
        if not isinstance(credentials, dict):
            raise ConfigError("krampus_credentials must be an object with login and password")

        discord_token = env.get_str("DISCORD_TOKEN", raw.get("discord_token", ""))
        login = env.get_str("KRAMPUS_LOGIN", credentials.get("login", ""))
        password = env.get_str("KRAMPUS_PASSWORD", credentials.get("password", ""))

        if not discord_token:
            raise ConfigError("discord_token is required")
        if not login or not password:
            raise ConfigError("krampus_credentials.login and krampus_credentials.password are required")

        # Accept both "key_lengths": [..] and the older single "key_length"
        if "key_lengths" in raw:
            key_lengths = _int_set(raw["key_lengths"], "key_lengths")
        elif "key_length" in raw:
            key_lengths = _int_set([raw["key_length"]], "key_length")
        else:
            raise ConfigError("key_lengths is required")
        if not key_lengths or any(n <= 0 for n in key_lengths):
            raise ConfigError("key_lengths must contain positive lengths")

        policy = str(raw.get("auth_failure_policy", "exit")).lower()
        if policy not in AUTH_FAILURE_POLICIES:
            raise ConfigError(f"auth_failure_policy must be one of: {', '.join(AUTH_FAILURE_POLICIES)}")

        max_workers = _number(raw, "max_workers", 16, int)
        if max_workers < 1:
            raise ConfigError("max_workers must be at least 1")

        auth_interval = _number(raw, "auth_interval", 300.0, float)
        if auth_interval <= 0:
            raise ConfigError("auth_interval must be positive")

        return cls(
            discord_token=discord_token,
            login=login,
            password=password,
            server_ids=_int_set(raw.get("server_ids", []), "server_ids"),
            key_lengths=key_lengths,
            strict=_flag(raw, "strict", False),
            snipe_images=_flag(raw, "snipe_images", False),
            ignore_urls=_flag(raw, "ignore_urls", True),
            batch_keys=_flag(raw, "batch_keys", True),
            auth_interval=auth_interval,
            auth_failure_policy=policy,
            max_workers=max_workers,
            connection_timeout=_number(raw, "connection_timeout", 10.0, float),
            read_timeout=_number(raw, "read_timeout", 30.0, float),
            max_retries=_number(raw, "max_retries", 3, int),
            api_url=str(raw.get("api_url", DEFAULT_API_URL)).rstrip("/"),
            origin=str(raw.get("origin", DEFAULT_ORIGIN)).rstrip("/"),
            verbose=env.get_bool("VERBOSE", _flag(raw, "verbose", False)),
        )

    @property
    def timeout(self):
        """(connect, read) timeout tuple for requests"""
        return (self.connection_timeout, self.read_timeout)


class _Env:
    """Lookup helper: .env file first, then environment variables"""

    def __init__(self, env_config: Dict[str, Optional[str]]):
        self.env_config = env_config

    def get_str(self, key: str, default: str = "") -> str:
        value = self.env_config.get(key) or os.environ.get(key)
        return value if value else str(default or "")

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.env_config.get(key) or os.environ.get(key)
        if value is None or value == "":
            return default
        return value == "1" or value.lower() == "true"


def _flag(raw: Dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false")
    return value


def _number(raw: Dict[str, Any], key: str, default, kind):
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number")
    return kind(value)


def _int_set(values: Any, key: str) -> FrozenSet[int]:
    if not isinstance(values, list):
        raise ConfigError(f"{key} must be a list of integers")
    result = set()
    for value in values:
        # Discord ids are often pasted as strings
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key} must be a list of integers, got {value!r}")
        result.add(value)
    return frozenset(result)
