"""Process-wide configuration read from the environment."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import List, Optional

ENABLE_PLUGINS_ENV = "IMAGING_ADAPTERS_ENABLE_PLUGINS"
PLUGIN_PATH_ENV = "IMAGING_ADAPTERS_PLUGIN_PATH"

_TRUE_VALUES = {"1", "true", "yes", "on"}

_lock = threading.Lock()
_external_plugins_enabled: Optional[bool] = None


def get_env_bool(name: str, default: bool) -> bool:
    """Read a boolean environment variable.

    ``1``, ``true``, ``yes`` and ``on`` (any case) are true, any other
    non-empty value is false, and an unset or empty variable yields
    ``default``.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def are_external_plugins_enabled() -> bool:
    """Return whether plugins not marked ``isInternal`` may register adapters.

    The environment is consulted once per process; later changes to the
    variable have no effect.
    """
    global _external_plugins_enabled
    if _external_plugins_enabled is None:
        with _lock:
            if _external_plugins_enabled is None:
                _external_plugins_enabled = get_env_bool(ENABLE_PLUGINS_ENV, True)
    return _external_plugins_enabled


def plugin_search_paths() -> List[Path]:
    """Return the manifest search paths listed in the environment."""
    raw = os.getenv(PLUGIN_PATH_ENV, "")
    return [Path(entry).expanduser() for entry in raw.split(os.pathsep) if entry.strip()]
