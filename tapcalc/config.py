"""Environment-driven settings for tapcalc.

    TAPCALC_MAX_DIGITS  cap on digits per typed number (0 = unlimited)
    TAPCALC_TRACE       "1"/"true"/"yes" to print the key tape after `press`

Command-line options override these.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Resolved tapcalc settings."""

    max_digits: int = 0
    trace: bool = False


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Malformed values fall back to the defaults.

    Args:
        env: Variable mapping to read. Defaults to os.environ.
    """
    env = os.environ if env is None else env
    return Settings(
        max_digits=_env_int(env, "TAPCALC_MAX_DIGITS", 0),
        trace=_env_bool(env, "TAPCALC_TRACE", False),
    )
