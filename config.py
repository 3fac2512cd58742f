"""Runtime configuration for the MiLight bridge.

Values are read once from the environment at import time.
"""

from __future__ import annotations

import os

VERSION = '1.0.0'


def _get_env(key: str, default: str) -> str:
    return os.environ.get(f'MILIGHT_{key}', default)


def _get_env_int(key: str, default: int, minimum: int | None = None) -> int:
    try:
        value = int(_get_env(key, str(default)))
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    try:
        return float(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    value = _get_env(key, '1' if default else '0')
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# HTTP server
HOST = _get_env('HOST', '0.0.0.0')
PORT = _get_env_int('PORT', 8080)
DEBUG = _get_env_bool('DEBUG', False)

# Logging
LOG_LEVEL = _get_env('LOG_LEVEL', 'INFO').upper()

# Transmission
PACKET_REPEATS = _get_env_int('PACKET_REPEATS', 10, minimum=1)
HTTP_REPEAT_FACTOR = _get_env_int('HTTP_REPEAT_FACTOR', 5, minimum=1)

# Capture
CAPTURE_POLL_INTERVAL = _get_env_float('CAPTURE_POLL_INTERVAL', 0.5)

# Radio backend: 'memory' (loopback) or 'udp' (external radio daemon)
RADIO_BACKEND = _get_env('RADIO_BACKEND', 'memory').strip().lower()
RADIO_HOST = _get_env('RADIO_HOST', '127.0.0.1')
RADIO_PORT = _get_env_int('RADIO_PORT', 5987)
RADIO_LISTEN_PORT = _get_env_int('RADIO_LISTEN_PORT', 5988)
