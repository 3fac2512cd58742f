"""
MiLight protocol constants.
"""

from __future__ import annotations

# =============================================================================
# TRANSMISSION
# =============================================================================

# Resend count used for gateway-wide and stepped CCT commands
DEFAULT_RESEND_COUNT = 10

# Bounds accepted for a raw frame repeat count
RAW_REPEATS_MIN = 1
RAW_REPEATS_MAX = 1000

# =============================================================================
# RADIO CONFIGURATIONS
# =============================================================================

RGBW_PACKET_LENGTH = 7
RGBW_SYNCWORD = (0x147A, 0x258B)
RGBW_CHANNELS = (9, 40, 71)
RGBW_PROTOCOL_ID = 0xB0

CCT_PACKET_LENGTH = 7
CCT_SYNCWORD = (0x050A, 0x55AA)
CCT_CHANNELS = (4, 39, 74)
CCT_PROTOCOL_ID = 0x5A

# =============================================================================
# RGBW BUTTON CODES
# =============================================================================

RGBW_ALL_ON = 0x01
RGBW_ALL_OFF = 0x02
RGBW_GROUP_ON = (0x03, 0x05, 0x07, 0x09)
RGBW_GROUP_OFF = (0x04, 0x06, 0x08, 0x0A)
RGBW_BRIGHTNESS = 0x0E
RGBW_COLOR = 0x0F
# Added to a group "on" button to switch the group to white
RGBW_WHITE_OFFSET = 0x10

# Brightness on the wire is a 5-bit value, 0x90 for 0% descending in steps of 8
RGBW_BRIGHTNESS_STEPS = 25

# =============================================================================
# CCT BUTTON CODES
# =============================================================================

CCT_ALL_ON = 0x05
CCT_ALL_OFF = 0x09
CCT_GROUP_ON = (0x08, 0x0D, 0x07, 0x02)
CCT_GROUP_OFF = (0x0B, 0x03, 0x0A, 0x06)
CCT_BRIGHTNESS_UP = 0x0C
CCT_BRIGHTNESS_DOWN = 0x04
CCT_TEMPERATURE_UP = 0x0E
CCT_TEMPERATURE_DOWN = 0x0F

# CCT bulbs only support relative steps; absolute values are emulated
CCT_INTERVALS = 10

# Number of "on" presses that make a freshly powered bulb forget its remotes
UNPAIR_PRESSES = 5

# =============================================================================
# INBOUND FRAMES
# =============================================================================

# Frames kept per radio type while nobody is listening
INBOUND_QUEUE_SIZE = 200
