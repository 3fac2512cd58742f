"""Tests for device address resolution."""

from __future__ import annotations

import pytest

from utils.milight import (
    DeviceAddress,
    RadioType,
    UnknownDeviceTypeError,
    parse_device_id,
    parse_group_id,
    resolve_address,
    resolve_radio_type,
)


class TestResolveRadioType:
    @pytest.mark.parametrize('token,expected', [
        ('rgbw', RadioType.RGBW),
        ('RGBW', RadioType.RGBW),
        ('cct', RadioType.CCT),
        (' Cct ', RadioType.CCT),
    ])
    def test_known_tokens(self, token, expected):
        assert resolve_radio_type(token) is expected

    @pytest.mark.parametrize('token', ['', 'rgb_cct', 'fut089', 'unknown', None, 42])
    def test_unknown_tokens(self, token):
        assert resolve_radio_type(token) is RadioType.UNKNOWN

    def test_idempotent(self):
        assert resolve_radio_type('rgbw') is resolve_radio_type('rgbw')
        assert resolve_radio_type('nope') is resolve_radio_type('nope')


class TestParseIds:
    def test_decimal_device_id(self):
        assert parse_device_id('4660') == 0x1234

    def test_hex_device_id(self):
        assert parse_device_id('0x1234') == 0x1234
        assert parse_device_id('0XBEEF') == 0xBEEF

    def test_device_id_masked_to_16_bits(self):
        assert parse_device_id('65537') == 1

    def test_non_numeric_device_id_is_zero(self):
        assert parse_device_id('kitchen') == 0
        assert parse_device_id('') == 0
        assert parse_device_id(None) == 0

    def test_group_id(self):
        assert parse_group_id('3') == 3

    def test_group_id_masked_to_8_bits(self):
        assert parse_group_id('257') == 1

    def test_non_numeric_group_id_is_zero(self):
        assert parse_group_id('all') == 0


class TestResolveAddress:
    def test_group_address(self):
        address = resolve_address('0x10', 'rgbw', '2')
        assert address == DeviceAddress(device_id=0x10, device_type=RadioType.RGBW, group_id=2)
        assert address.is_gateway is False

    def test_gateway_address(self):
        address = resolve_address('100', 'cct')
        assert address.group_id is None
        assert address.is_gateway is True

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownDeviceTypeError) as exc_info:
            resolve_address('1', 'lava_lamp', '1')
        assert exc_info.value.token == 'lava_lamp'
        assert 'lava_lamp' in str(exc_info.value)
