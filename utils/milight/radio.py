"""Radio types and their fixed frame layouts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from utils.constants import (
    CCT_CHANNELS,
    CCT_PACKET_LENGTH,
    CCT_SYNCWORD,
    RGBW_CHANNELS,
    RGBW_PACKET_LENGTH,
    RGBW_SYNCWORD,
)


class RadioType(Enum):
    """Families of MiLight devices sharing a frame layout."""
    RGBW = 'rgbw'
    CCT = 'cct'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class FrameField:
    label: str
    offset: int
    length: int = 1


@dataclass(frozen=True)
class RadioConfig:
    """Radio parameters and frame descriptor for one device family."""
    type: RadioType
    packet_length: int
    syncword: tuple[int, int]
    channels: tuple[int, ...]
    fields: tuple[FrameField, ...]


RGBW_CONFIG = RadioConfig(
    type=RadioType.RGBW,
    packet_length=RGBW_PACKET_LENGTH,
    syncword=RGBW_SYNCWORD,
    channels=RGBW_CHANNELS,
    fields=(
        FrameField('Request type', 0),
        FrameField('Device ID', 1, 2),
        FrameField('Color', 3),
        FrameField('Brightness', 4),
        FrameField('Button', 5),
        FrameField('Sequence Num', 6),
    ),
)

CCT_CONFIG = RadioConfig(
    type=RadioType.CCT,
    packet_length=CCT_PACKET_LENGTH,
    syncword=CCT_SYNCWORD,
    channels=CCT_CHANNELS,
    fields=(
        FrameField('Request type', 0),
        FrameField('Device ID', 1, 2),
        FrameField('Group', 3),
        FrameField('Button', 4),
        FrameField('Sequence Num', 5),
        FrameField('Sequence Chk', 6),
    ),
)

RADIO_CONFIGS: dict[RadioType, RadioConfig] = {
    RadioType.RGBW: RGBW_CONFIG,
    RadioType.CCT: CCT_CONFIG,
}


def get_radio_config(radio_type: RadioType) -> RadioConfig | None:
    return RADIO_CONFIGS.get(radio_type)
