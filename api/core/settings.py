"""
Environment-driven settings.

Values are read lazily on each call so tests can monkeypatch the environment.
A `.env` file is loaded once by `main.py` before anything here is used.
"""

from __future__ import annotations

import os

DEFAULT_EXTERNAL_API_TIMEOUT_S = 10.0


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def db_pool_min_size() -> int:
    return max(1, _env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(db_pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def db_command_timeout_s() -> float:
    return _env_float("DB_COMMAND_TIMEOUT_S", 30.0)


def external_api_url() -> str:
    return _env_str("EXTERNAL_API_URL")


def external_api_timeout_s() -> float:
    timeout = _env_float("EXTERNAL_API_TIMEOUT_S", DEFAULT_EXTERNAL_API_TIMEOUT_S)
    if timeout <= 0:
        return DEFAULT_EXTERNAL_API_TIMEOUT_S
    return timeout


def listen_host() -> str:
    return _env_str("HOST", "0.0.0.0")


def listen_port() -> int:
    return _env_int("PORT", 8080)


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
