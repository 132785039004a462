"""Where assetsweep keeps its files.

Config (policy, theme) lives under ``$XDG_CONFIG_HOME/assetsweep`` and the
deletion history under ``$XDG_STATE_HOME/assetsweep``; unset or empty
variables fall back to ``~/.config`` and ``~/.local/state``.
"""

import os
from pathlib import Path

APP_NAME = "assetsweep"


def _xdg_base(env_var: str, fallback: str) -> Path:
    return Path(os.environ.get(env_var) or Path.home() / fallback) / APP_NAME


def get_config_dir() -> Path:
    return _xdg_base("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    return _xdg_base("XDG_STATE_HOME", ".local/state")


def get_policy_path() -> Path:
    """Default location of the cleaner policy (``policy.toml``)."""
    return get_config_dir() / "policy.toml"


def get_user_theme_path() -> Path:
    return get_config_dir() / "theme.toml"


def get_history_path() -> Path:
    return get_state_dir() / "history.jsonl"


def _make_dir(path: Path, label: str) -> Path:
    """mkdir -p, reporting failures as RuntimeError."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {label} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {label} directory {path}: {e.strerror or e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    return _make_dir(get_config_dir(), "config")


def ensure_state_dir() -> Path:
    return _make_dir(get_state_dir(), "state")
