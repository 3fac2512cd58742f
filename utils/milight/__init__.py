"""MiLight command dispatch and capture bridge."""

from utils.milight.address import (
    DeviceAddress,
    parse_device_id,
    parse_group_id,
    resolve_address,
    resolve_radio_type,
)
from utils.milight.capture import CaptureListener, CaptureState
from utils.milight.client import MiLightClient, Status, get_milight_client
from utils.milight.commands import (
    Command,
    ControlRequest,
    Operation,
    dispatch,
    normalize_gateway_request,
    normalize_group_request,
    parse_control_request,
)
from utils.milight.errors import (
    InvalidRawFrameError,
    MalformedRequestError,
    MiLightError,
    UnknownDeviceTypeError,
)
from utils.milight.policy import TransmissionPolicy
from utils.milight.radio import RADIO_CONFIGS, RadioConfig, RadioType
from utils.milight.raw import RawFrameInjector
from utils.milight.transceiver import MemoryTransceiver, Transceiver, UdpTransceiver

__all__ = [
    'CaptureListener',
    'CaptureState',
    'Command',
    'ControlRequest',
    'DeviceAddress',
    'InvalidRawFrameError',
    'MalformedRequestError',
    'MemoryTransceiver',
    'MiLightClient',
    'MiLightError',
    'Operation',
    'RADIO_CONFIGS',
    'RadioConfig',
    'RadioType',
    'RawFrameInjector',
    'Status',
    'Transceiver',
    'TransmissionPolicy',
    'UdpTransceiver',
    'UnknownDeviceTypeError',
    'dispatch',
    'get_milight_client',
    'normalize_gateway_request',
    'normalize_group_request',
    'parse_control_request',
    'parse_device_id',
    'parse_group_id',
    'resolve_address',
    'resolve_radio_type',
]
