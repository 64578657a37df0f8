"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for svcschema:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.svcschema/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_cache_dir`.
* **Global config** -- A single :class:`~svcschema.models.GlobalConfig`
  JSON file storing source templates, cache and build defaults.
* **Project config** -- An optional ``./svcschema.json`` holding a partial
  config that is deep-merged over the global one.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration. The resolved config always carries an
  explicit ``cache.directory`` so nothing downstream reads the environment.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from svcschema.exceptions import ConfigError
from svcschema.models import GlobalConfig

_APP_NAME = "svcschema"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "svcschema.json"

ENV_OUTPUT_DIR = "SVCSCHEMA_OUTPUT_DIR"
ENV_SOURCE = "SVCSCHEMA_SOURCE"
ENV_CACHE_DIR = "SVCSCHEMA_CACHE_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/svcschema/`` (default ``~/.config/svcschema/``).
    On macOS/Windows: ``~/.svcschema/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the default cache directory, creating it if necessary.

    Holds the raw spec cache. Cached data can be safely deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/svcschema/`` (default ``~/.cache/svcschema/``).
    On macOS/Windows: ``~/.svcschema/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/svcschema/`` (default ``~/.local/share/svcschema/``).
    On macOS/Windows: ``~/.svcschema/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up and the original exception re-raised.
    """
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
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~svcschema.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    The value is parsed as JSON when possible (so ``4`` and ``true`` keep
    their types) and used as a plain string otherwise.

    Example::

        set_config_value(cfg, "build.workers", "8")

    Raises:
        ConfigError: If the key does not exist or the value fails validation.
    """
    parts = key.split(".")
    data = config.model_dump(mode="json")
    node: Any = data
    for part in parts[:-1]:
        if not isinstance(node, dict) or part not in node:
            raise ConfigError(f"Unknown config key: {key}")
        node = node[part]
    if not isinstance(node, dict) or parts[-1] not in node:
        raise ConfigError(f"Unknown config key: {key}")

    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    node[parts[-1]] = parsed

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for {key}: {exc}") from exc


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./svcschema.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or is not an object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_output_dir: Optional[str] = None,
    cli_source: Optional[str] = None,
    cli_workers: Optional[int] = None,
    cli_continue_on_error: Optional[bool] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``SVCSCHEMA_OUTPUT_DIR``,
           ``SVCSCHEMA_SOURCE``, ``SVCSCHEMA_CACHE_DIR``)
        3. Project config (``./svcschema.json``)
        4. User config (``~/.config/svcschema/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~svcschema.models.GlobalConfig` with
        ``cache.directory`` always populated.

    Raises:
        ConfigError: If any layer is invalid.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _validate(_deep_merge(data, project)).model_dump(mode="json")

    env_output_dir = os.environ.get(ENV_OUTPUT_DIR)
    if env_output_dir:
        data["build"]["output_dir"] = env_output_dir
    env_source = os.environ.get(ENV_SOURCE)
    if env_source:
        data["source"]["spec_template"] = env_source
    env_cache_dir = os.environ.get(ENV_CACHE_DIR)
    if env_cache_dir:
        data["cache"]["directory"] = env_cache_dir

    if cli_output_dir is not None:
        data["build"]["output_dir"] = cli_output_dir
    if cli_source is not None:
        data["source"]["spec_template"] = cli_source
    if cli_workers is not None:
        data["build"]["workers"] = cli_workers
    if cli_continue_on_error is not None:
        data["build"]["continue_on_error"] = cli_continue_on_error
    if cli_no_cache:
        data["cache"]["enabled"] = False

    config = _validate(data)
    if config.cache.directory is None:
        config.cache.directory = str(get_cache_dir())
    return config


def _validate(data: dict[str, Any]) -> GlobalConfig:
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
