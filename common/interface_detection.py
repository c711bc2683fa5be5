"""Automatic detection of a wireless interface for beacon injection."""

import os
import sys
from typing import List, Optional

from common.logging_setup import get_logger

logger = get_logger(__name__)

# ARPHRD_IEEE80211_RADIOTAP, the link type of a monitor-mode interface
ARPHRD_RADIOTAP = 803

SYS_CLASS_NET = "/sys/class/net"


def _read_link_type(path: str) -> Optional[int]:
    try:
        with open(os.path.join(path, "type"), "r") as f:
            return int(f.read().strip())
    except (OSError, ValueError):
        return None


def list_wireless_interfaces(sys_class_net: str = SYS_CLASS_NET) -> List[str]:
    """
    List wireless interfaces, monitor-mode ones first.

    Args:
        sys_class_net: sysfs network class directory

    Returns:
        Interface names, empty when none are found or not on Linux
    """
    try:
        names = sorted(os.listdir(sys_class_net))
    except OSError as e:
        logger.debug(f"Cannot list {sys_class_net}: {e}")
        return []

    monitor = []
    managed = []
    for name in names:
        path = os.path.join(sys_class_net, name)
        link_type = _read_link_type(path)
        if link_type == ARPHRD_RADIOTAP:
            monitor.append(name)
        elif os.path.isdir(os.path.join(path, "wireless")) or os.path.isdir(os.path.join(path, "phy80211")):
            managed.append(name)
    return monitor + managed


def detect_wireless_interface(sys_class_net: str = SYS_CLASS_NET) -> Optional[str]:
    """
    Automatically detect the interface to inject beacons on.

    Returns:
        Interface name if found, None otherwise
    """
    if not sys.platform.startswith("linux"):
        return None

    interfaces = list_wireless_interfaces(sys_class_net)
    if interfaces:
        logger.info(f"Detected wireless interface: {interfaces[0]}")
        return interfaces[0]
    return None


def get_default_interface() -> str:
    """
    Get default wireless interface name.

    Returns:
        Default interface name
    """
    return "wlan0"


def find_wireless_interface(requested_iface: Optional[str] = None, sys_class_net: str = SYS_CLASS_NET) -> str:
    """
    Find the wireless interface to transmit on.

    If an interface is requested, use it. Otherwise, try to auto-detect.
    Falls back to the default if auto-detection fails.

    Args:
        requested_iface: Explicitly requested interface name (optional)
        sys_class_net: sysfs network class directory

    Returns:
        Interface name to use
    """
    if requested_iface:
        logger.info(f"Using requested interface: {requested_iface}")
        return requested_iface

    logger.info("Auto-detecting wireless interface...")
    detected_iface = detect_wireless_interface(sys_class_net)

    if detected_iface:
        return detected_iface

    default_iface = get_default_interface()
    logger.warning(
        f"Could not auto-detect wireless interface, using default: {default_iface}"
    )
    logger.warning(
        "If this is incorrect, specify --iface <name> explicitly"
    )
    return default_iface
