"""Resolve URL tokens into typed device addresses.

Type resolution is total: anything unrecognized maps to ``RadioType.UNKNOWN``.
Numeric tokens that fail to parse degrade to zero rather than raising.
"""

from __future__ import annotations

from dataclasses import dataclass

from utils.milight.errors import UnknownDeviceTypeError
from utils.milight.radio import RadioType

_TYPE_ALIASES = {
    'rgbw': RadioType.RGBW,
    'cct': RadioType.CCT,
}


@dataclass(frozen=True)
class DeviceAddress:
    device_id: int
    device_type: RadioType
    group_id: int | None = None

    @property
    def is_gateway(self) -> bool:
        """True when the address targets the whole device rather than a group."""
        return self.group_id is None


def resolve_radio_type(text: str | None) -> RadioType:
    if not text or not isinstance(text, str):
        return RadioType.UNKNOWN
    return _TYPE_ALIASES.get(text.strip().lower(), RadioType.UNKNOWN)


def parse_device_id(text: str | None) -> int:
    """Parse a decimal or 0x-prefixed device id, masked to 16 bits."""
    if not text:
        return 0
    text = text.strip()
    try:
        if text.lower().startswith('0x'):
            value = int(text[2:], 16)
        else:
            value = int(text, 10)
    except ValueError:
        return 0
    return value & 0xFFFF


def parse_group_id(text: str | None) -> int:
    if not text:
        return 0
    try:
        value = int(text.strip(), 10)
    except ValueError:
        return 0
    return value & 0xFF


def resolve_address(device_id: str, type_token: str, group_id: str | None = None) -> DeviceAddress:
    """Build a DeviceAddress, raising UnknownDeviceTypeError for unrecognized types."""
    radio_type = resolve_radio_type(type_token)
    if radio_type is RadioType.UNKNOWN:
        raise UnknownDeviceTypeError(type_token)

    return DeviceAddress(
        device_id=parse_device_id(device_id),
        device_type=radio_type,
        group_id=parse_group_id(group_id) if group_id is not None else None,
    )
