"""Raw frame injection, bypassing the command model."""

from __future__ import annotations

from typing import Any

from utils.constants import DEFAULT_RESEND_COUNT, RAW_REPEATS_MAX, RAW_REPEATS_MIN
from utils.logging import get_logger
from utils.milight.address import resolve_radio_type
from utils.milight.client import MiLightClient
from utils.milight.errors import InvalidRawFrameError, UnknownDeviceTypeError
from utils.milight.radio import RadioConfig, get_radio_config

logger = get_logger('milight.raw')

_SEPARATORS = str.maketrans('', '', ' :\t\n-')


def decode_frame(packet: Any, radio_config: RadioConfig) -> bytes:
    """Decode a hex string and check it fills exactly one frame."""
    if not isinstance(packet, str) or not packet.strip():
        raise InvalidRawFrameError('packet must be a non-empty hex string')

    cleaned = packet.translate(_SEPARATORS)
    if cleaned.lower().startswith('0x'):
        cleaned = cleaned[2:]
    try:
        frame = bytes.fromhex(cleaned)
    except ValueError:
        raise InvalidRawFrameError(f'packet is not valid hex: {packet!r}')

    if len(frame) != radio_config.packet_length:
        raise InvalidRawFrameError(
            f'packet is {len(frame)} bytes, {radio_config.type.value} frames are '
            f'{radio_config.packet_length} bytes'
        )
    return frame


def parse_repeats(value: Any) -> int:
    if value is None:
        return DEFAULT_RESEND_COUNT
    if isinstance(value, bool):
        raise InvalidRawFrameError('num_repeats must be an integer')
    try:
        repeats = int(value)
    except (TypeError, ValueError):
        raise InvalidRawFrameError('num_repeats must be an integer')
    if isinstance(value, float) and value != repeats:
        raise InvalidRawFrameError('num_repeats must be an integer')
    if not (RAW_REPEATS_MIN <= repeats <= RAW_REPEATS_MAX):
        raise InvalidRawFrameError(
            f'num_repeats must be between {RAW_REPEATS_MIN} and {RAW_REPEATS_MAX}'
        )
    return repeats


class RawFrameInjector:
    """Validates a hex frame and writes it a fixed number of times."""

    def __init__(self, client: MiLightClient):
        self.client = client

    def send(self, type_token: str, packet: Any, num_repeats: Any = None) -> dict:
        radio_config = get_radio_config(resolve_radio_type(type_token))
        if radio_config is None:
            raise UnknownDeviceTypeError(type_token)

        frame = decode_frame(packet, radio_config)
        repeats = parse_repeats(num_repeats)

        logger.info(f"Injecting raw {radio_config.type.value} frame {frame.hex().upper()} x{repeats}")
        self.client.write_raw(radio_config, frame, repeats)

        return {
            'type': radio_config.type.value,
            'packet': frame.hex().upper(),
            'num_repeats': repeats,
        }
