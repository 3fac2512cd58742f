"""Wait for the next inbound frame of a radio type.

The wait is a loop over a bounded queue read: each pass blocks for at most
``poll_interval`` seconds, then checks the cancellation token. There is no
overall timeout; the wait ends on a frame or on cancellation.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Union

import config
from utils.logging import get_logger
from utils.milight.address import resolve_radio_type
from utils.milight.client import MiLightClient
from utils.milight.errors import UnknownDeviceTypeError
from utils.milight.radio import RadioConfig, get_radio_config

logger = get_logger('milight.capture')

DEFAULT_POLL_INTERVAL = 0.5

# Either an Event set on cancellation or a callable returning True once cancelled
CancelToken = Union[threading.Event, Callable[[], bool]]


class CaptureState(Enum):
    WAITING = 'waiting'
    AVAILABLE = 'available'
    CANCELLED = 'cancelled'


def _is_cancelled(token: CancelToken | None) -> bool:
    if token is None:
        return False
    if isinstance(token, threading.Event):
        return token.is_set()
    return bool(token())


def format_report(client: MiLightClient, radio_config: RadioConfig, frame: bytes) -> str:
    return (
        f"Packet received ({len(frame)} bytes):\n"
        f"{client.format_packet(radio_config, frame)}\n\n"
    )


class CaptureListener:
    """Cancellable wait for one captured frame."""

    def __init__(self, client: MiLightClient, poll_interval: float = config.CAPTURE_POLL_INTERVAL):
        self.client = client
        self.poll_interval = poll_interval if poll_interval > 0 else DEFAULT_POLL_INTERVAL
        self.state = CaptureState.WAITING

    def resolve(self, type_token: str) -> RadioConfig:
        radio_config = get_radio_config(resolve_radio_type(type_token))
        if radio_config is None:
            raise UnknownDeviceTypeError(type_token)
        return radio_config

    def wait_for_frame(self, radio_config: RadioConfig, cancel: CancelToken | None = None) -> bytes | None:
        """Block until a frame arrives or ``cancel`` fires; None when cancelled."""
        self.state = CaptureState.WAITING
        while True:
            if _is_cancelled(cancel):
                self.state = CaptureState.CANCELLED
                return None

            frame = self.client.next_frame(radio_config.type, timeout=self.poll_interval)
            if frame is not None:
                self.state = CaptureState.AVAILABLE
                return frame

    def listen(self, type_token: str, cancel: CancelToken | None = None) -> str | None:
        """Capture one frame for a type token and render it, or None when cancelled."""
        radio_config = self.resolve(type_token)
        logger.info(f"Listening for {radio_config.type.value} traffic")

        frame = self.wait_for_frame(radio_config, cancel)
        if frame is None:
            logger.info(f"Capture of {radio_config.type.value} traffic cancelled")
            return None

        logger.info(f"Captured {radio_config.type.value} frame {frame.hex().upper()}")
        return format_report(self.client, radio_config, frame)
