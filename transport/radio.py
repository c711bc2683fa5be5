"""Raw 802.11 transmit abstraction for the whisper beacon advertiser.

This module provides the single primitive the advertiser needs: hand a
complete 802.11 frame to the radio on a station interface and report
whether it went out.
"""

import threading
from typing import List, Optional, Set, Tuple

from common.logging_setup import get_logger

logger = get_logger(__name__)


class RadioError(Exception):
    """Raised when the radio cannot transmit a frame."""
    pass


class Radio:
    """Base class for raw frame transmitters."""

    def transmit(self, interface: str, buffer: bytes, append_header: bool = False) -> bool:
        """
        Transmit a raw 802.11 frame.

        Args:
            interface: Interface to transmit on (e.g., wlan0mon)
            buffer: Complete frame bytes
            append_header: Let the driver prepend its own 802.11 header

        Returns:
            True if the frame was handed to the driver, False otherwise
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release radio resources."""
        return None


class ScapyRadio(Radio):
    """
    Radio backed by scapy's layer 2 sender.

    Frames are wrapped in a minimal radiotap header, which monitor-mode
    drivers require for injection. The 802.11 header itself always comes
    from the caller's buffer.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self._socket = None
        self._socket_iface: Optional[str] = None
        self._lock = threading.Lock()

    def _get_socket(self, interface: str):
        from scapy.all import conf

        if self._socket is None or self._socket_iface != interface:
            self.close()
            self._socket = conf.L2socket(iface=interface)
            self._socket_iface = interface
            logger.info(f"Opened raw socket on {interface}")
        return self._socket

    def transmit(self, interface: str, buffer: bytes, append_header: bool = False) -> bool:
        if append_header:
            raise RadioError("Driver header augmentation is not supported; pass a complete frame")

        from scapy.all import Dot11, RadioTap
        from scapy.error import Scapy_Exception

        with self._lock:
            try:
                frame = RadioTap() / Dot11(bytes(buffer))
                self._get_socket(interface).send(frame)
                logger.debug(f"Transmitted {len(buffer)} bytes on {interface}")
                return True
            except (OSError, Scapy_Exception) as e:
                logger.error(f"Failed to transmit on {interface}: {e}")
                self.close()
                return False

    def close(self) -> None:
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError as e:
                logger.warning(f"Error closing raw socket: {e}")
            self._socket = None
            self._socket_iface = None


class InMemoryRadio(Radio):
    """
    Radio that records frames instead of transmitting them.

    Used for dry runs and tests. Attempts listed in ``fail_on`` (0-based
    transmit call indexes) report failure.
    """

    def __init__(self, fail_on: Optional[Set[int]] = None):
        self.fail_on: Set[int] = set(fail_on or ())
        self.sent: List[Tuple[str, bytes]] = []
        self.calls = 0
        self.append_header_requests = 0

    def transmit(self, interface: str, buffer: bytes, append_header: bool = False) -> bool:
        index = self.calls
        self.calls += 1
        if append_header:
            self.append_header_requests += 1
        if index in self.fail_on:
            logger.debug(f"Simulated transmit failure on call {index}")
            return False
        self.sent.append((interface, bytes(buffer)))
        return True
