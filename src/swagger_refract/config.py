"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent configuration of swagger-refract:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.swagger-refract/`` on macOS and Windows.  See :func:`get_config_dir`.
* **Global config** -- a single :class:`~swagger_refract.models.GlobalConfig`
  JSON file storing defaults (source maps, documentation URL, strict mode,
  output format).
* **Project config** -- an optional ``./swagger-refract.json`` holding the
  same keys, for settings pinned by a repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  effective configuration.

Writes go through :func:`_atomic_write` (temp file then rename) so a crash
never leaves a truncated config file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from swagger_refract.exceptions import ConfigError
from swagger_refract.models import GlobalConfig

_APP_NAME = "swagger-refract"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "swagger-refract.json"

ENV_SOURCE_MAP = "SWAGGER_REFRACT_SOURCE_MAP"
ENV_DOCS_URL = "SWAGGER_REFRACT_DOCS_URL"
ENV_STRICT = "SWAGGER_REFRACT_STRICT"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms following the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/swagger-refract/`` (default
    ``~/.config/swagger-refract/``).  Elsewhere: ``~/.swagger-refract/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults when no file exists.

    Raises:
        ConfigError: If the file exists but holds invalid JSON or values.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./swagger-refract.json`` as a dict, or ``None`` when absent.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable; ``None`` when unset."""
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for {name}: {raw!r}")


def resolve_config(
    cli_source_map: Optional[bool] = None,
    cli_strict: Optional[bool] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_source_map``, ``cli_strict``, ``cli_format``)
        2. Environment variables (``SWAGGER_REFRACT_SOURCE_MAP``,
           ``SWAGGER_REFRACT_DOCS_URL``, ``SWAGGER_REFRACT_STRICT``)
        3. Project config (``./swagger-refract.json``)
        4. User config (``~/.config/swagger-refract/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    config = load_global_config()

    project = load_project_config()
    if project is not None:
        merged = {**config.model_dump(), **project}
        try:
            config = GlobalConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    env_source_map = _env_flag(ENV_SOURCE_MAP)
    if env_source_map is not None:
        config.generate_source_map = env_source_map
    env_strict = _env_flag(ENV_STRICT)
    if env_strict is not None:
        config.strict = env_strict
    env_docs_url = os.environ.get(ENV_DOCS_URL)
    if env_docs_url:
        config.docs_url = env_docs_url

    if cli_source_map is not None:
        config.generate_source_map = cli_source_map
    if cli_strict is not None:
        config.strict = cli_strict
    if cli_format is not None:
        config.output.format = cli_format

    return config
