"""Tests for swagger_refract.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from swagger_refract.config import (
    _atomic_write,
    get_config_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
)
from swagger_refract.exceptions import ConfigError
from swagger_refract.models import DEFAULT_DOCS_URL, GlobalConfig, OutputConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestConfigDir:

    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("swagger_refract.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "swagger-refract"
        assert result.is_dir()

    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("swagger_refract.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "swagger-refract"

    def test_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("swagger_refract.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".swagger-refract"
        assert result.is_dir()


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:

    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_overwrites(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        target.write_text("old", encoding="utf-8")
        _atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_no_temp_files_left_on_failure(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        with patch("swagger_refract.config.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                _atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:

    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.docs_url == DEFAULT_DOCS_URL
        assert config.generate_source_map is False

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(
            generate_source_map=True, strict=True, output=OutputConfig(format="json")
        )
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_value(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"output": {"format": "xml"}})
        with pytest.raises(ConfigError):
            load_global_config()


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:

    def test_absent(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_loaded_from_cwd(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "swagger-refract.json", {"strict": True})
        assert load_project_config() == {"strict": True}

    def test_not_an_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "swagger-refract.json", [1, 2])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:

    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_user_config(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(generate_source_map=True))
        assert resolve_config().generate_source_map is True

    def test_project_overrides_user(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(generate_source_map=True, strict=True))
        _write_json(isolated_config / "swagger-refract.json", {"generate_source_map": False})

        config = resolve_config()
        assert config.generate_source_map is False
        assert config.strict is True

    def test_invalid_project_value(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "swagger-refract.json", {"strict": "maybe"})
        with pytest.raises(ConfigError, match="Invalid project config"):
            resolve_config()

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "swagger-refract.json", {"generate_source_map": False})
        monkeypatch.setenv("SWAGGER_REFRACT_SOURCE_MAP", "yes")
        monkeypatch.setenv("SWAGGER_REFRACT_STRICT", "1")
        monkeypatch.setenv("SWAGGER_REFRACT_DOCS_URL", "https://docs.example.com")

        config = resolve_config()
        assert config.generate_source_map is True
        assert config.strict is True
        assert config.docs_url == "https://docs.example.com"

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SWAGGER_REFRACT_SOURCE_MAP", "true")
        monkeypatch.setenv("SWAGGER_REFRACT_STRICT", "true")

        config = resolve_config(cli_source_map=False, cli_strict=False, cli_format="plain")
        assert config.generate_source_map is False
        assert config.strict is False
        assert config.output.format == "plain"

    def test_invalid_env_flag(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SWAGGER_REFRACT_STRICT", "sometimes")
        with pytest.raises(ConfigError, match="SWAGGER_REFRACT_STRICT"):
            resolve_config()
