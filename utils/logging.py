"""Logging helpers shared by routes and radio components."""

from __future__ import annotations

import logging
import sys

from config import LOG_LEVEL

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

_root_configured = False


def _configure_root() -> None:
    global _root_configured
    if _root_configured:
        return

    root = logging.getLogger('milight')
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    _root_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the 'milight' namespace."""
    _configure_root()
    if not name.startswith('milight'):
        name = f'milight.{name}'
    return logging.getLogger(name)
