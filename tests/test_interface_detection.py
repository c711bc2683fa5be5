"""Tests for wireless interface detection."""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common import interface_detection
from common.interface_detection import (
    ARPHRD_RADIOTAP,
    find_wireless_interface,
    list_wireless_interfaces,
)


def _make_iface(root, name, link_type=1, wireless=False):
    path = root / name
    path.mkdir()
    (path / "type").write_text(f"{link_type}\n")
    if wireless:
        (path / "wireless").mkdir()
    return path


def test_monitor_interfaces_come_first(tmp_path) -> None:
    _make_iface(tmp_path, "eth0")
    _make_iface(tmp_path, "lo", link_type=772)
    _make_iface(tmp_path, "wlan0", wireless=True)
    _make_iface(tmp_path, "wlan0mon", link_type=ARPHRD_RADIOTAP)

    assert list_wireless_interfaces(str(tmp_path)) == ["wlan0mon", "wlan0"]


def test_missing_sysfs_lists_nothing(tmp_path) -> None:
    assert list_wireless_interfaces(str(tmp_path / "absent")) == []


def test_requested_interface_wins(tmp_path) -> None:
    _make_iface(tmp_path, "wlan0mon", link_type=ARPHRD_RADIOTAP)

    assert find_wireless_interface("mon7", str(tmp_path)) == "mon7"


def test_detects_interface(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(interface_detection.sys, "platform", "linux")
    _make_iface(tmp_path, "wlan1", wireless=True)

    assert find_wireless_interface(None, str(tmp_path)) == "wlan1"


@pytest.mark.parametrize("platform", ["linux", "darwin"])
def test_falls_back_to_default(monkeypatch, tmp_path, platform) -> None:
    monkeypatch.setattr(interface_detection.sys, "platform", platform)
    _make_iface(tmp_path, "eth0")

    assert find_wireless_interface(None, str(tmp_path)) == "wlan0"
