"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for spectest:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.spectest/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~spectest.models.GlobalConfig`
  JSON file holding the completion installer settings.
* **Precedence resolution** -- :func:`resolve_config` layers environment
  variables over the global config file.
* **Project root** -- :func:`find_project_root` locates the directory
  holding ``spectest/`` so the completion data provider can list changes
  and specs from any subdirectory.

All whole-file writes (completion scripts, shell startup files) go through
:func:`_atomic_write`, a temp-file-then-rename strategy that never leaves a
half-written file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from spectest.exceptions import ConfigError
from spectest.models import GlobalConfig

_APP_NAME = "spectest"
_CONFIG_FILENAME = "config.json"
_PROJECT_DIRNAME = "spectest"

ENV_COMPLETION_DIR = "SPECTEST_COMPLETION_DIR"
ENV_COMPLETION_AUTO_CONFIGURE = "SPECTEST_COMPLETION_AUTO_CONFIGURE"

_FALSE_VALUES = {"0", "false", "no", "off"}


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
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/spectest/`` (default ``~/.config/spectest/``).
    On macOS/Windows: ``~/.spectest/``.

    The directory is not created; spectest only ever reads from it.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/spectest/`` (default ``~/.local/share/spectest/``).
    On macOS/Windows: ``~/.spectest/data/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. The permission bits
    of an existing *path* are carried over to the replacement. On any
    failure the temp file is removed and the original file is untouched.

    A symlinked *path* is written through: the rename happens next to the
    file the link points at, so the link itself survives.
    """
    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    mode: Optional[int] = None
    if path.exists():
        mode = path.stat().st_mode & 0o777

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
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        if mode is not None:
            os.chmod(tmp_path, mode)
        else:
            os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
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
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~spectest.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config() -> GlobalConfig:
    """Resolve config with the full precedence chain.

    Precedence (high to low):
        1. Environment variables (``SPECTEST_COMPLETION_DIR``,
           ``SPECTEST_COMPLETION_AUTO_CONFIGURE``)
        2. User config (``~/.config/spectest/config.json``)
        3. Defaults

    Returns:
        The effective :class:`~spectest.models.GlobalConfig`.
    """
    config = load_global_config()

    env_dir = os.environ.get(ENV_COMPLETION_DIR)
    if env_dir:
        config.completion.install_dir = env_dir

    env_auto = os.environ.get(ENV_COMPLETION_AUTO_CONFIGURE)
    if env_auto is not None and env_auto.strip():
        config.completion.auto_configure = env_auto.strip().lower() not in _FALSE_VALUES

    return config


# --- Project root ---


def find_project_root(start: Optional[Path] = None) -> Path:
    """Return the nearest directory at or above *start* containing ``spectest/``.

    Args:
        start: Directory to begin the search from. Defaults to the current
            working directory.

    Returns:
        The project root, or *start* itself when no ancestor qualifies.
    """
    origin = (start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if (candidate / _PROJECT_DIRNAME).is_dir():
            return candidate
    return origin
