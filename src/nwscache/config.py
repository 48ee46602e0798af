"""Cache-root resolution, configuration file handling and precedence resolution.

* **Cache root** -- :func:`resolve_cache_root` derives
  ``$HOME/.config/nwscache`` from the ``HOME`` environment variable,
  creating the directories on demand. Without a usable home directory it
  returns the discard path (``os.devnull``) so every cache operation quietly
  becomes a no-op and requests go straight to the network.
* **Global config** -- a single :class:`~nwscache.models.GlobalConfig`
  JSON file at ``$HOME/.config/nwscache.json``. It lives beside the cache
  root rather than inside it because every entry of the cache root is
  treated as a cache key directory.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  ``NWSCACHE_*`` environment variables and the file.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so a crash never leaves a truncated file behind under
its final name.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from nwscache.exceptions import ConfigError
from nwscache.models import GlobalConfig
from nwscache.output import error

APP_NAME = "nwscache"
DISCARD_PATH = Path(os.devnull)
_CONFIG_BASE = ".config"
_CONFIG_FILENAME = f"{APP_NAME}.json"


# --- Cache root ---


def _home_dir() -> Optional[Path]:
    """Return ``$HOME`` as a path, or ``None`` when unset or empty."""
    home = os.environ.get("HOME", "")
    if not home:
        return None
    return Path(home)


def ensure_dir(path: Path) -> bool:
    """Create *path* (one level) if missing. Returns ``False`` on failure."""
    if path.is_dir():
        return True
    try:
        path.mkdir()
    except OSError as exc:
        error(f'Error creating "{path}": {exc}')
        return False
    return True


def resolve_cache_root() -> Path:
    """Return the cache root, creating ``~/.config`` and ``~/.config/nwscache``.

    The path is resolved afresh on every call; callers hold on to the result
    as an explicit handle (see :class:`~nwscache.cache.ResponseCache`).

    Returns:
        ``$HOME/.config/nwscache``, or :data:`DISCARD_PATH` when ``HOME`` is
        unset/empty or either directory cannot be created. Never raises.
    """
    home = _home_dir()
    if home is None:
        return DISCARD_PATH

    base = home / _CONFIG_BASE
    if not ensure_dir(base):
        return DISCARD_PATH

    root = base / APP_NAME
    if not ensure_dir(root):
        return DISCARD_PATH
    return root


def is_discard(path: Path) -> bool:
    """``True`` when *path* is the inert discard path."""
    return path == DISCARD_PATH


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX. Its name (``.nwscache-XXXX.tmp``)
    never parses as a cache expiry, so a leftover from a crash is reaped by
    the next lookup or purge. Line endings in *data* are written as-is.

    Raises:
        OSError: If the directory is missing or the write fails. The
            temporary file is removed before re-raising.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            newline="",
            dir=path.parent,
            prefix=f".{APP_NAME}-",
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
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def config_path() -> Optional[Path]:
    """Path to the global config file, or ``None`` without a home directory."""
    home = _home_dir()
    if home is None:
        return None
    return home / _CONFIG_BASE / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~nwscache.models.GlobalConfig`, or defaults when
        there is no home directory or no file yet.

    Raises:
        ConfigError: If the file exists but is invalid JSON or fails
            validation.
    """
    path = config_path()
    if path is None or not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> Path:
    """Persist *config* atomically and return the file path.

    Raises:
        ConfigError: Without a home directory, or when the write fails.
    """
    path = config_path()
    if path is None:
        raise ConfigError("Cannot save config: HOME is not set")
    data = config.model_dump(mode="json")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(path, json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Cannot write config {path}: {exc}") from exc
    return path


# --- Precedence resolution ---


def resolve_config(
    cli_user_agent: Optional[str] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--user-agent``, ``--no-cache``)
        2. Environment (``NWSCACHE_USER_AGENT``, ``NWSCACHE_TIMEOUT``)
        3. ``~/.config/nwscache.json``
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid or ``NWSCACHE_TIMEOUT``
            is not an integer.
    """
    config = load_global_config()

    env_agent = os.environ.get("NWSCACHE_USER_AGENT")
    if env_agent:
        config.request.user_agent = env_agent
    env_timeout = os.environ.get("NWSCACHE_TIMEOUT")
    if env_timeout:
        try:
            config.request.timeout = int(env_timeout)
        except ValueError:
            raise ConfigError(
                f"NWSCACHE_TIMEOUT must be an integer, got: {env_timeout}"
            ) from None

    if cli_user_agent is not None:
        config.request.user_agent = cli_user_agent
    if cli_no_cache:
        config.cache.enabled = False

    return config
