"""Translate control request bodies into primitive radio operations.

A request body is decoded once into a ``ControlRequest``. Normalization then
produces an ordered list of ``Operation`` values, each carrying the resend
count chosen by the ``TransmissionPolicy``. Dispatch is fire-and-forget and
never rolls back earlier operations.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from utils.logging import get_logger
from utils.milight.address import DeviceAddress
from utils.milight.client import MiLightClient, Status
from utils.milight.errors import MalformedRequestError
from utils.milight.policy import TransmissionPolicy
from utils.milight.radio import RadioType

logger = get_logger('milight.commands')


class Command(Enum):
    PAIR = 'pair'
    UNPAIR = 'unpair'
    SET_WHITE = 'set_white'
    LEVEL_UP = 'level_up'
    LEVEL_DOWN = 'level_down'
    TEMPERATURE_UP = 'temperature_up'
    TEMPERATURE_DOWN = 'temperature_down'


CCT_STEP_OPERATIONS = {
    Command.LEVEL_UP: 'increase_cct_brightness',
    Command.LEVEL_DOWN: 'decrease_cct_brightness',
    Command.TEMPERATURE_UP: 'increase_temperature',
    Command.TEMPERATURE_DOWN: 'decrease_temperature',
}


@dataclass(frozen=True)
class ControlRequest:
    status: str | None = None
    command: Command | None = None
    hue: int | None = None
    level: int | None = None
    temperature: int | None = None


@dataclass(frozen=True)
class Operation:
    """A single client call: method name, positional args and resend count."""
    name: str
    args: tuple = field(default_factory=tuple)
    repeats: int | None = None

    def apply(self, client: MiLightClient) -> None:
        getattr(client, self.name)(*self.args, repeats=self.repeats)


def _parse_status(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    raise MalformedRequestError('status must be a string')


def _parse_command(value: Any) -> Command | None:
    if not isinstance(value, str):
        raise MalformedRequestError('command must be a string')
    try:
        return Command(value)
    except ValueError:
        logger.debug(f"Ignoring unknown command '{value}'")
        return None


def _parse_number(data: dict, key: str) -> int | None:
    if key not in data or data[key] is None:
        return None
    raw = data[key]
    if isinstance(raw, bool):
        raise MalformedRequestError(f'Invalid {key}')
    try:
        return int(float(raw))
    except (TypeError, ValueError, OverflowError):
        raise MalformedRequestError(f'Invalid {key}')


def parse_control_request(body: str | bytes | dict | None) -> ControlRequest:
    """Decode a request body into a ControlRequest.

    Accepts raw JSON text or an already-decoded object. Anything that is not
    a JSON object raises MalformedRequestError.
    """
    if isinstance(body, (str, bytes)):
        try:
            data = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            raise MalformedRequestError('Invalid JSON')
    else:
        data = body

    if not isinstance(data, dict):
        raise MalformedRequestError('Invalid JSON')

    status = _parse_status(data['status']) if data.get('status') is not None else None
    command = _parse_command(data['command']) if data.get('command') is not None else None

    return ControlRequest(
        status=status,
        command=command,
        hue=_parse_number(data, 'hue'),
        level=_parse_number(data, 'level'),
        temperature=_parse_number(data, 'temperature'),
    )


def normalize_group_request(
    address: DeviceAddress,
    request: ControlRequest,
    policy: TransmissionPolicy,
) -> list[Operation]:
    """Operations for a request addressed to one group of a device."""
    radio_type = address.device_type
    device_id = address.device_id
    group_id = address.group_id or 0
    repeats = policy.group_repeats
    operations: list[Operation] = []

    if request.status is not None:
        status = Status.ON if request.status in ('on', 'true') else Status.OFF
        operations.append(Operation('update_status', (radio_type, device_id, group_id, status), repeats))

    if request.command is Command.UNPAIR:
        operations.append(Operation('unpair', (radio_type, device_id, group_id), repeats))
    elif request.command is Command.PAIR:
        operations.append(Operation('pair', (radio_type, device_id, group_id), repeats))

    if radio_type is RadioType.RGBW:
        if request.hue is not None:
            operations.append(Operation('update_hue', (device_id, group_id, request.hue), repeats))
        if request.level is not None:
            operations.append(Operation('update_brightness', (device_id, group_id, request.level), repeats))
        if request.command is Command.SET_WHITE:
            operations.append(Operation('update_color_white', (device_id, group_id), repeats))

    elif radio_type is RadioType.CCT:
        if request.temperature is not None:
            operations.append(Operation('update_temperature', (device_id, group_id, request.temperature), repeats))
        if request.level is not None:
            operations.append(Operation('update_cct_brightness', (device_id, group_id, request.level), repeats))
        step = CCT_STEP_OPERATIONS.get(request.command)
        if step:
            operations.append(Operation(step, (device_id, group_id), policy.cct_step_repeats))

    return operations


def normalize_gateway_request(
    address: DeviceAddress,
    request: ControlRequest,
    policy: TransmissionPolicy,
) -> list[Operation]:
    """Operations for a request addressed to a whole device: on/off only."""
    if request.status == 'on':
        return [Operation('all_on', (address.device_type, address.device_id), policy.gateway_repeats)]
    if request.status == 'off':
        return [Operation('all_off', (address.device_type, address.device_id), policy.gateway_repeats)]
    return []


def dispatch(client: MiLightClient, operations: list[Operation]) -> None:
    for operation in operations:
        logger.debug(f"Dispatching {operation.name}{operation.args} x{operation.repeats}")
        operation.apply(client)
