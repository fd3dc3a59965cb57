"""
Environment helpers shared by the general config sections.
"""

from __future__ import annotations

import os
from dataclasses import MISSING, Field
from typing import Any, Callable, Dict

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _coerce(raw: str, default: Any) -> Any:
    """Convert an env string to the type of the field's default."""
    if isinstance(default, bool):
        return raw.strip().lower() in _TRUE_VALUES
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def read_env_defaults(
    env_map: Dict[str, str],
    dataclass_fields: Dict[str, Field],
) -> Dict[str, Any]:
    """Collect constructor kwargs from environment variables.

    Only fields whose variable is set are returned, so unset variables
    fall back to the dataclass defaults.
    """
    values: Dict[str, Any] = {}
    for field_name, env_name in env_map.items():
        raw = os.environ.get(env_name)
        if raw is None:
            continue
        f = dataclass_fields[field_name]
        default = f.default if f.default is not MISSING else None
        values[field_name] = _coerce(raw, default)
    return values


def env_sync(env_name: str) -> Callable[[Any], None]:
    """Return an ``apply_change`` hook that mirrors a value into the environment."""

    def _apply(value: Any) -> None:
        if isinstance(value, bool):
            os.environ[env_name] = "true" if value else "false"
        else:
            os.environ[env_name] = str(value)

    return _apply
