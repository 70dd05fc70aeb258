"""Tests for configuration loading."""

from __future__ import annotations

import dataclasses
import json

import pytest

from keysnipe.config import DEFAULT_API_URL, Config, ConfigError


def base_config_dict(**overrides):
    raw = {
        "discord_token": "discord-token",
        "krampus_credentials": {"login": "sniper@example.com", "password": "hunter2"},
        "server_ids": [1234],
        "key_lengths": [4],
    }
    raw.update(overrides)
    return raw


def write_config(path, raw) -> str:
    path.write_text(json.dumps(raw))
    return str(path)


class TestLoad:
    """Tests for ``Config.load``."""

    def test_loads_documented_shape(self, tmp_path):
        path = write_config(tmp_path / "config.json", base_config_dict(
            server_ids=[1234, "5678"], key_lengths=[16, 20], strict=True, snipe_images=False,
        ))

        cfg = Config.load(path)

        assert cfg.discord_token == "discord-token"
        assert cfg.login == "sniper@example.com"
        assert cfg.password == "hunter2"
        assert cfg.server_ids == frozenset({1234, 5678})
        assert cfg.key_lengths == frozenset({16, 20})
        assert cfg.strict is True
        assert cfg.snipe_images is False

    def test_defaults(self, tmp_path):
        cfg = Config.load(write_config(tmp_path / "config.json", base_config_dict()))

        assert cfg.ignore_urls is True
        assert cfg.batch_keys is True
        assert cfg.auth_interval == 300.0
        assert cfg.auth_failure_policy == "exit"
        assert cfg.api_url == DEFAULT_API_URL
        assert cfg.timeout == (10.0, 30.0)

    def test_default_path_is_cwd_config_json(self, tmp_path):
        write_config(tmp_path / "config.json", base_config_dict())
        assert Config.load().discord_token == "discord-token"

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = write_config(tmp_path / "other.json", base_config_dict(discord_token="env-path"))
        monkeypatch.setenv("KEYSNIPE_CONFIG", path)
        assert Config.load().discord_token == "env-path"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            Config.load(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="could not parse"):
            Config.load(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = write_config(tmp_path / "config.json", [1, 2])
        with pytest.raises(ConfigError, match="JSON object"):
            Config.load(path)

    def test_env_file_overrides_secrets(self, tmp_path):
        path = write_config(tmp_path / "config.json", base_config_dict())
        env_file = tmp_path / ".env"
        env_file.write_text("DISCORD_TOKEN=from-dotenv\nKRAMPUS_PASSWORD=dotenv-pass\n")

        cfg = Config.load(path, env_file=env_file)

        assert cfg.discord_token == "from-dotenv"
        assert cfg.password == "dotenv-pass"
        assert cfg.login == "sniper@example.com"

    def test_environment_overrides_secrets(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KRAMPUS_LOGIN", "env-login")
        monkeypatch.setenv("VERBOSE", "1")
        cfg = Config.load(write_config(tmp_path / "config.json", base_config_dict()))
        assert cfg.login == "env-login"
        assert cfg.verbose is True


class TestFromDict:
    """Validation in ``Config.from_dict``."""

    def test_single_key_length(self):
        raw = base_config_dict()
        del raw["key_lengths"]
        raw["key_length"] = 36
        assert Config.from_dict(raw).key_lengths == frozenset({36})

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"discord_token": ""}, "discord_token"),
            ({"krampus_credentials": {"login": "x"}}, "krampus_credentials"),
            ({"krampus_credentials": "x:y"}, "krampus_credentials"),
            ({"key_lengths": []}, "key_lengths"),
            ({"key_lengths": [0]}, "key_lengths"),
            ({"key_lengths": "16"}, "key_lengths"),
            ({"server_ids": [1.5]}, "server_ids"),
            ({"strict": "yes"}, "strict"),
            ({"auth_failure_policy": "ignore"}, "auth_failure_policy"),
            ({"max_workers": 0}, "max_workers"),
            ({"auth_interval": -1}, "auth_interval"),
            ({"read_timeout": "30"}, "read_timeout"),
        ],
    )
    def test_rejects_bad_values(self, overrides, message):
        with pytest.raises(ConfigError, match=message):
            Config.from_dict(base_config_dict(**overrides))

    def test_missing_key_lengths(self):
        raw = base_config_dict()
        del raw["key_lengths"]
        with pytest.raises(ConfigError, match="key_lengths"):
            Config.from_dict(raw)

    def test_policy_is_case_insensitive(self):
        assert Config.from_dict(base_config_dict(auth_failure_policy="RETRY")).auth_failure_policy == "retry"

    def test_config_is_frozen(self, cfg):
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.strict = True
