"""Tests for request parsing and command normalization."""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

from utils.constants import DEFAULT_RESEND_COUNT
from utils.milight import (
    Command,
    ControlRequest,
    DeviceAddress,
    MalformedRequestError,
    MiLightClient,
    Operation,
    RadioType,
    Status,
    TransmissionPolicy,
    dispatch,
    normalize_gateway_request,
    normalize_group_request,
    parse_control_request,
)

RGBW_GROUP = DeviceAddress(device_id=0x1234, device_type=RadioType.RGBW, group_id=1)
CCT_GROUP = DeviceAddress(device_id=0x5678, device_type=RadioType.CCT, group_id=2)
RGBW_GATEWAY = DeviceAddress(device_id=0x1234, device_type=RadioType.RGBW)


@pytest.fixture
def policy():
    return TransmissionPolicy(baseline=10, group_repeat_factor=5)


@pytest.fixture
def mock_client():
    mock = MagicMock(spec=MiLightClient)
    mock.resend_count = 10
    return mock


class TestParseControlRequest:
    def test_parses_all_fields(self):
        req = parse_control_request('{"status": "on", "command": "set_white", "hue": 120, "level": "50", "temperature": 3}')
        assert req == ControlRequest(status='on', command=Command.SET_WHITE, hue=120, level=50, temperature=3)

    def test_empty_object(self):
        assert parse_control_request('{}') == ControlRequest()

    def test_boolean_status(self):
        assert parse_control_request({'status': True}).status == 'true'
        assert parse_control_request({'status': False}).status == 'false'

    def test_unknown_command_ignored(self):
        assert parse_control_request({'command': 'disco'}).command is None

    def test_keywords_are_case_sensitive(self):
        req = parse_control_request({'status': 'ON', 'command': 'PAIR'})
        assert req.status == 'ON'
        assert req.command is None

    @pytest.mark.parametrize('body', ['not json', b'\xff\xfe', '[1, 2]', '"on"', '', None])
    def test_malformed_body(self, body):
        with pytest.raises(MalformedRequestError):
            parse_control_request(body)

    @pytest.mark.parametrize('body', [
        {'hue': 'red'},
        {'level': True},
        {'temperature': [1]},
        {'command': 5},
        {'status': {'on': True}},
    ])
    def test_invalid_field_types(self, body):
        with pytest.raises(MalformedRequestError):
            parse_control_request(body)


class TestNormalizeGroupRequest:
    def test_status_on_rgbw(self, policy):
        ops = normalize_group_request(RGBW_GROUP, ControlRequest(status='on'), policy)
        assert ops == [Operation('update_status', (RadioType.RGBW, 0x1234, 1, Status.ON), 50)]

    @pytest.mark.parametrize('status,expected', [
        ('on', Status.ON),
        ('true', Status.ON),
        ('off', Status.OFF),
        ('false', Status.OFF),
        ('dim', Status.OFF),
        ('ON', Status.OFF),
        ('True', Status.OFF),
    ])
    def test_status_mapping(self, policy, status, expected):
        ops = normalize_group_request(CCT_GROUP, ControlRequest(status=status), policy)
        assert ops[0].args[3] is expected

    @pytest.mark.parametrize('address', [RGBW_GROUP, CCT_GROUP])
    def test_pairing_for_any_type(self, policy, address):
        pair_ops = normalize_group_request(address, ControlRequest(command=Command.PAIR), policy)
        unpair_ops = normalize_group_request(address, ControlRequest(command=Command.UNPAIR), policy)
        assert [op.name for op in pair_ops] == ['pair']
        assert [op.name for op in unpair_ops] == ['unpair']

    def test_rgbw_fields_in_order(self, policy):
        req = ControlRequest(status='on', hue=200, level=80, command=Command.SET_WHITE)
        ops = normalize_group_request(RGBW_GROUP, req, policy)
        assert [op.name for op in ops] == ['update_status', 'update_hue', 'update_brightness', 'update_color_white']
        assert all(op.repeats == 50 for op in ops)

    def test_rgbw_ignores_cct_fields(self, policy):
        req = ControlRequest(temperature=5, command=Command.LEVEL_UP)
        assert normalize_group_request(RGBW_GROUP, req, policy) == []

    def test_cct_fields(self, policy):
        req = ControlRequest(temperature=4, level=30)
        ops = normalize_group_request(CCT_GROUP, req, policy)
        assert ops == [
            Operation('update_temperature', (0x5678, 2, 4), 50),
            Operation('update_cct_brightness', (0x5678, 2, 30), 50),
        ]

    def test_cct_ignores_rgbw_fields(self, policy):
        req = ControlRequest(hue=100, command=Command.SET_WHITE)
        assert normalize_group_request(CCT_GROUP, req, policy) == []

    @pytest.mark.parametrize('command,name', [
        (Command.LEVEL_UP, 'increase_cct_brightness'),
        (Command.LEVEL_DOWN, 'decrease_cct_brightness'),
        (Command.TEMPERATURE_UP, 'increase_temperature'),
        (Command.TEMPERATURE_DOWN, 'decrease_temperature'),
    ])
    def test_cct_steps_use_default_count(self, policy, command, name):
        ops = normalize_group_request(CCT_GROUP, ControlRequest(status='on', command=command), policy)
        assert ops[0].repeats == 50
        assert ops[1] == Operation(name, (0x5678, 2), DEFAULT_RESEND_COUNT)


class TestNormalizeGatewayRequest:
    def test_on(self, policy):
        ops = normalize_gateway_request(RGBW_GATEWAY, ControlRequest(status='on'), policy)
        assert ops == [Operation('all_on', (RadioType.RGBW, 0x1234), DEFAULT_RESEND_COUNT)]

    def test_off_ignores_baseline(self):
        policy = TransmissionPolicy(baseline=42, group_repeat_factor=3)
        ops = normalize_gateway_request(RGBW_GATEWAY, ControlRequest(status='off'), policy)
        assert ops == [Operation('all_off', (RadioType.RGBW, 0x1234), DEFAULT_RESEND_COUNT)]

    @pytest.mark.parametrize('req', [
        ControlRequest(),
        ControlRequest(status='true'),
        ControlRequest(status='ON'),
        ControlRequest(status='Off'),
        ControlRequest(hue=10, level=20, command=Command.PAIR),
    ])
    def test_only_on_off_honored(self, policy, req):
        assert normalize_gateway_request(RGBW_GATEWAY, req, policy) == []


class TestDispatch:
    def test_calls_client_in_order_with_explicit_repeats(self, policy, mock_client):
        req = ControlRequest(status='on', level=40)
        dispatch(mock_client, normalize_group_request(RGBW_GROUP, req, policy))

        assert mock_client.mock_calls == [
            call.update_status(RadioType.RGBW, 0x1234, 1, Status.ON, repeats=50),
            call.update_brightness(0x1234, 1, 40, repeats=50),
        ]
        assert mock_client.resend_count == 10

    def test_cct_step_leaves_baseline(self, policy, mock_client):
        dispatch(mock_client, normalize_group_request(CCT_GROUP, ControlRequest(command=Command.LEVEL_UP), policy))

        mock_client.increase_cct_brightness.assert_called_once_with(0x5678, 2, repeats=DEFAULT_RESEND_COUNT)
        assert mock_client.resend_count == 10

    def test_no_rollback_on_failure(self, policy, mock_client):
        mock_client.update_hue.side_effect = RuntimeError('radio gone')
        req = ControlRequest(status='on', hue=10, level=20)

        with pytest.raises(RuntimeError):
            dispatch(mock_client, normalize_group_request(RGBW_GROUP, req, policy))

        mock_client.update_status.assert_called_once()
        mock_client.update_brightness.assert_not_called()
