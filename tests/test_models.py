"""Tests for the DeviceRecord model."""
from ipaddress import IPv4Address, IPv6Address

import pytest
from pydantic import ValidationError

from cast_discovery.models import DeviceRecord


def test_display_name():
    record = DeviceRecord(address="198.51.100.7", port=8009, friendly_name="Living Room")
    assert record.display_name() == "Living Room (198.51.100.7)"


def test_display_name_without_friendly_name():
    record = DeviceRecord(address="2001:db8::7", port=8009)
    assert record.display_name() == "Unnamed (2001:db8::7)"


def test_address_types():
    assert isinstance(DeviceRecord(address="198.51.100.7", port=8009).address, IPv4Address)
    assert isinstance(DeviceRecord(address="2001:db8::7", port=8009).address, IPv6Address)


@pytest.mark.parametrize("kwargs", [
    {"port": 8009},
    {"address": "198.51.100.7"},
    {"address": "not-an-ip", "port": 8009},
    {"address": "198.51.100.7", "port": 70000},
    {"address": "198.51.100.7", "port": -1},
    {"address": "198.51.100.7", "port": 8009, "serial": "x"},
])
def test_invalid_records_cannot_be_built(kwargs):
    with pytest.raises(ValidationError):
        DeviceRecord(**kwargs)


def test_records_are_immutable():
    record = DeviceRecord(address="198.51.100.7", port=8009)
    with pytest.raises(ValidationError):
        record.friendly_name = "Kitchen"


def test_structural_equality_and_hashing():
    a = DeviceRecord(address="198.51.100.7", port=8009, friendly_name="TV")
    b = DeviceRecord(address=IPv4Address("198.51.100.7"), port=8009, friendly_name="TV")
    c = DeviceRecord(address="198.51.100.7", port=8009, friendly_name="TV", device_id="abc")

    assert a == b
    assert len({a, b}) == 1
    assert a != c
    assert a.key == c.key == (IPv4Address("198.51.100.7"), 8009)


@pytest.mark.parametrize("address, icon_path, expected", [
    ("198.51.100.7", "/setup/icon.png", "http://198.51.100.7:8008/setup/icon.png"),
    ("2001:db8::7", "/setup/icon.png", "http://[2001:db8::7]:8008/setup/icon.png"),
    ("198.51.100.7", None, None),
])
def test_icon_url(address, icon_path, expected):
    assert DeviceRecord(address=address, port=8009, icon_path=icon_path).icon_url() == expected
