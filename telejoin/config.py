"""Configuration for telejoin.

Values are read from environment variables at import time. Before that, an
optional env file (``~/.telejoin/telejoin.env`` or the path in
``TELEJOIN_ENV_FILE``) is loaded; variables already present in the
environment take precedence over the file.

Call ``importlib.reload(telejoin.config)`` to re-read the environment.
"""

import logging
import os
from pathlib import Path
from typing import Dict, MutableMapping, Optional

from .errors import ConfigError

logger = logging.getLogger("telejoin")

BASE_DIR = Path(os.path.expanduser(os.environ.get("TELEJOIN_BASE_DIR", "~/.telejoin")))
DEFAULT_ENV_FILE = BASE_DIR / "telejoin.env"


def parse_env_file(text: str) -> Dict[str, str]:
    """Parse KEY=VALUE lines into a dict.

    Blank lines and ``#`` comments are skipped. Values may be wrapped in
    single or double quotes, and a quoted value may span several lines.
    """
    values: Dict[str, str] = {}
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        i += 1

        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()

        if value and value[0] in ('"', "'"):
            quote = value[0]
            if len(value) > 1 and value.endswith(quote):
                value = value[1:-1]
            else:
                # Multiline quoted value
                parts = [value[1:]]
                while i < len(lines):
                    next_line = lines[i].rstrip("\n")
                    i += 1
                    if next_line.endswith(quote):
                        parts.append(next_line[:-1])
                        break
                    parts.append(next_line)
                value = "\n".join(parts)

        values[key] = value
    return values


def load_env_file(
    path: Optional[Path] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """Load an env file into ``environ`` without overriding existing keys.

    ``environ`` defaults to ``os.environ``.

    Returns the values that were applied. A missing file is not an error.
    """
    environ = os.environ if environ is None else environ
    path = Path(path) if path else Path(environ.get("TELEJOIN_ENV_FILE", DEFAULT_ENV_FILE))
    if not path.is_file():
        return {}

    try:
        parsed = parse_env_file(path.read_text())
    except OSError as e:
        logger.warning(f"Could not read config file {path}: {e}")
        return {}

    applied = {}
    for key, value in parsed.items():
        if key not in environ:
            environ[key] = value
            applied[key] = value
    return applied


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


load_env_file()

# Join window: join opens EARLY minutes before start, closes LATE minutes after
EARLY_JOIN_MINUTES = _env_float("TELEJOIN_EARLY_JOIN_MINUTES", 15.0)
LATE_JOIN_MINUTES = _env_float("TELEJOIN_LATE_JOIN_MINUTES", 60.0)

# Presence supervisor
PRESENCE_POLL_INTERVAL = _env_float("TELEJOIN_PRESENCE_POLL_INTERVAL", 3.0)
ESCALATION_THRESHOLD = _env_int("TELEJOIN_ESCALATION_THRESHOLD", 3)

DEBUG = _env_bool("TELEJOIN_DEBUG", False)

if EARLY_JOIN_MINUTES < 0 or LATE_JOIN_MINUTES < 0:
    raise ConfigError("Join window minutes must not be negative")
if PRESENCE_POLL_INTERVAL <= 0:
    raise ConfigError("TELEJOIN_PRESENCE_POLL_INTERVAL must be positive")
if ESCALATION_THRESHOLD < 0:
    raise ConfigError("TELEJOIN_ESCALATION_THRESHOLD must not be negative")


def as_dict() -> Dict[str, object]:
    """Effective configuration, keyed by environment variable name."""
    return {
        "TELEJOIN_EARLY_JOIN_MINUTES": EARLY_JOIN_MINUTES,
        "TELEJOIN_LATE_JOIN_MINUTES": LATE_JOIN_MINUTES,
        "TELEJOIN_PRESENCE_POLL_INTERVAL": PRESENCE_POLL_INTERVAL,
        "TELEJOIN_ESCALATION_THRESHOLD": ESCALATION_THRESHOLD,
        "TELEJOIN_DEBUG": DEBUG,
    }
