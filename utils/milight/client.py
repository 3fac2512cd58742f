"""MiLight radio client.

Encodes primitive device operations into RGBW and CCT frames and writes them
through a transceiver. Every operation takes an explicit ``repeats`` count;
when omitted the client's baseline ``resend_count`` is used. The baseline is
only changed by ``apply_settings``.
"""

from __future__ import annotations

import threading
from enum import Enum

import config
from utils.constants import (
    CCT_ALL_OFF,
    CCT_ALL_ON,
    CCT_BRIGHTNESS_DOWN,
    CCT_BRIGHTNESS_UP,
    CCT_GROUP_OFF,
    CCT_GROUP_ON,
    CCT_INTERVALS,
    CCT_PROTOCOL_ID,
    CCT_TEMPERATURE_DOWN,
    CCT_TEMPERATURE_UP,
    RGBW_ALL_OFF,
    RGBW_ALL_ON,
    RGBW_BRIGHTNESS,
    RGBW_BRIGHTNESS_STEPS,
    RGBW_COLOR,
    RGBW_GROUP_OFF,
    RGBW_GROUP_ON,
    RGBW_PROTOCOL_ID,
    RGBW_WHITE_OFFSET,
    UNPAIR_PRESSES,
)
from utils.logging import get_logger
from utils.milight.radio import RadioConfig, RadioType, get_radio_config
from utils.milight.transceiver import MemoryTransceiver, Transceiver, UdpTransceiver

logger = get_logger('milight.client')


class Status(Enum):
    ON = 'on'
    OFF = 'off'


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _group_button(buttons: tuple[int, ...], group_id: int, all_button: int) -> int:
    """Map a 1-based group id to its button; group 0 addresses every group."""
    if 1 <= group_id <= len(buttons):
        return buttons[group_id - 1]
    return all_button


class MiLightClient:
    """Builds MiLight frames and transmits them with redundancy."""

    def __init__(self, transceiver: Transceiver, resend_count: int = config.PACKET_REPEATS):
        self.transceiver = transceiver
        self._sequence = 0
        self._lock = threading.Lock()
        self.apply_settings(resend_count)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def apply_settings(self, packet_repeats: int) -> None:
        if packet_repeats < 1:
            raise ValueError('packet_repeats must be at least 1')
        self.resend_count = packet_repeats

    # ------------------------------------------------------------------
    # Raw I/O
    # ------------------------------------------------------------------

    def write_raw(self, radio_config: RadioConfig, frame: bytes, repeats: int) -> None:
        """Write a frame ``repeats`` times with no acknowledgment."""
        for _ in range(repeats):
            self.transceiver.write(radio_config, frame)

    def next_frame(self, radio_type: RadioType, timeout: float) -> bytes | None:
        return self.transceiver.next_frame(radio_type, timeout=timeout)

    @staticmethod
    def format_packet(radio_config: RadioConfig, frame: bytes) -> str:
        """Render a frame field by field using the config's layout."""
        lines = []
        for frame_field in radio_config.fields:
            chunk = frame[frame_field.offset:frame_field.offset + frame_field.length]
            lines.append(f"{frame_field.label:<14}: {chunk.hex().upper()}")
        lines.append(f"{'Raw':<14}: {' '.join(f'{b:02X}' for b in frame)}")
        return '\n'.join(lines)

    # ------------------------------------------------------------------
    # Frame builders
    # ------------------------------------------------------------------

    def _next_sequence(self) -> int:
        with self._lock:
            self._sequence = (self._sequence + 1) & 0xFF
            return self._sequence

    def _send(self, radio_type: RadioType, frame: bytes, repeats: int | None) -> None:
        radio_config = get_radio_config(radio_type)
        if radio_config is None:
            raise ValueError(f'No radio configuration for {radio_type.value}')
        count = self.resend_count if repeats is None else repeats
        logger.debug(f"TX {radio_type.value} x{count}: {frame.hex().upper()}")
        self.write_raw(radio_config, frame, count)

    def _rgbw_frame(
        self,
        device_id: int,
        group_id: int,
        button: int,
        color: int = 0,
        brightness: int = 0,
    ) -> bytes:
        return bytes([
            RGBW_PROTOCOL_ID,
            (device_id >> 8) & 0xFF,
            device_id & 0xFF,
            color & 0xFF,
            (brightness & 0xF8) | (group_id & 0x07),
            button & 0xFF,
            self._next_sequence(),
        ])

    def _cct_frame(self, device_id: int, group_id: int, button: int) -> bytes:
        sequence = self._next_sequence()
        return bytes([
            CCT_PROTOCOL_ID,
            (device_id >> 8) & 0xFF,
            device_id & 0xFF,
            group_id & 0xFF,
            button & 0xFF,
            sequence,
            (~sequence) & 0xFF,
        ])

    def _send_rgbw(self, device_id: int, group_id: int, button: int, repeats: int | None, **kwargs) -> None:
        self._send(RadioType.RGBW, self._rgbw_frame(device_id, group_id, button, **kwargs), repeats)

    def _send_cct(self, device_id: int, group_id: int, button: int, repeats: int | None) -> None:
        self._send(RadioType.CCT, self._cct_frame(device_id, group_id, button), repeats)

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def update_status(
        self,
        radio_type: RadioType,
        device_id: int,
        group_id: int,
        status: Status,
        repeats: int | None = None,
    ) -> None:
        if radio_type is RadioType.RGBW:
            buttons = RGBW_GROUP_ON if status is Status.ON else RGBW_GROUP_OFF
            all_button = RGBW_ALL_ON if status is Status.ON else RGBW_ALL_OFF
            self._send_rgbw(device_id, group_id, _group_button(buttons, group_id, all_button), repeats)
        elif radio_type is RadioType.CCT:
            buttons = CCT_GROUP_ON if status is Status.ON else CCT_GROUP_OFF
            all_button = CCT_ALL_ON if status is Status.ON else CCT_ALL_OFF
            self._send_cct(device_id, group_id, _group_button(buttons, group_id, all_button), repeats)
        else:
            raise ValueError(f'Unsupported radio type {radio_type.value}')

    def all_on(self, radio_type: RadioType, device_id: int, repeats: int | None = None) -> None:
        self.update_status(radio_type, device_id, 0, Status.ON, repeats=repeats)

    def all_off(self, radio_type: RadioType, device_id: int, repeats: int | None = None) -> None:
        self.update_status(radio_type, device_id, 0, Status.OFF, repeats=repeats)

    def pair(self, radio_type: RadioType, device_id: int, group_id: int, repeats: int | None = None) -> None:
        # Bulbs link to the first remote they hear within a few seconds of power-up
        self.update_status(radio_type, device_id, group_id, Status.ON, repeats=repeats)

    def unpair(self, radio_type: RadioType, device_id: int, group_id: int, repeats: int | None = None) -> None:
        for _ in range(UNPAIR_PRESSES):
            self.update_status(radio_type, device_id, group_id, Status.ON, repeats=repeats)

    def update_hue(self, device_id: int, group_id: int, hue: int, repeats: int | None = None) -> None:
        """Set RGBW color from a hue in degrees (0-359)."""
        # The remote's color wheel starts at blue and runs backwards
        color = ((int(hue) % 360) * 255 // 359 + 0xB0) & 0xFF
        self._send_rgbw(device_id, group_id, RGBW_COLOR, repeats, color=color)

    def update_brightness(self, device_id: int, group_id: int, level: int, repeats: int | None = None) -> None:
        """Set RGBW brightness from a 0-100 level."""
        steps = _clamp(int(level), 0, 100) * RGBW_BRIGHTNESS_STEPS // 100
        brightness = (0x90 - (steps * 8)) & 0xF8
        self._send_rgbw(device_id, group_id, RGBW_BRIGHTNESS, repeats, brightness=brightness)

    def update_color_white(self, device_id: int, group_id: int, repeats: int | None = None) -> None:
        button = _group_button(RGBW_GROUP_ON, group_id, RGBW_ALL_ON) + RGBW_WHITE_OFFSET
        self._send_rgbw(device_id, group_id, button, repeats)

    def increase_cct_brightness(self, device_id: int, group_id: int, repeats: int | None = None) -> None:
        self._send_cct(device_id, group_id, CCT_BRIGHTNESS_UP, repeats)

    def decrease_cct_brightness(self, device_id: int, group_id: int, repeats: int | None = None) -> None:
        self._send_cct(device_id, group_id, CCT_BRIGHTNESS_DOWN, repeats)

    def increase_temperature(self, device_id: int, group_id: int, repeats: int | None = None) -> None:
        self._send_cct(device_id, group_id, CCT_TEMPERATURE_UP, repeats)

    def decrease_temperature(self, device_id: int, group_id: int, repeats: int | None = None) -> None:
        self._send_cct(device_id, group_id, CCT_TEMPERATURE_DOWN, repeats)

    def update_temperature(self, device_id: int, group_id: int, temperature: int, repeats: int | None = None) -> None:
        """Step to an absolute temperature (0 warm to 10 cool)."""
        target = _clamp(int(temperature), 0, CCT_INTERVALS)
        for _ in range(CCT_INTERVALS):
            self.decrease_temperature(device_id, group_id, repeats=repeats)
        for _ in range(target):
            self.increase_temperature(device_id, group_id, repeats=repeats)

    def update_cct_brightness(self, device_id: int, group_id: int, level: int, repeats: int | None = None) -> None:
        """Step to an absolute brightness from a 0-100 level."""
        target = _clamp(int(level), 0, 100) * CCT_INTERVALS // 100
        for _ in range(CCT_INTERVALS):
            self.decrease_cct_brightness(device_id, group_id, repeats=repeats)
        for _ in range(target):
            self.increase_cct_brightness(device_id, group_id, repeats=repeats)

    def get_status(self) -> dict:
        return {
            'resend_count': self.resend_count,
            'transceiver': self.transceiver.get_status(),
        }


def create_transceiver(backend: str = config.RADIO_BACKEND) -> Transceiver:
    if backend == 'udp':
        return UdpTransceiver(
            radio_host=config.RADIO_HOST,
            radio_port=config.RADIO_PORT,
            listen_port=config.RADIO_LISTEN_PORT,
        )
    if backend != 'memory':
        logger.warning(f"Unknown radio backend '{backend}', using memory")
    return MemoryTransceiver()


# Global singleton
_client: MiLightClient | None = None
_client_lock = threading.Lock()


def get_milight_client() -> MiLightClient:
    """Get or create the global MiLightClient singleton."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = MiLightClient(create_transceiver(), resend_count=config.PACKET_REPEATS)
    return _client
