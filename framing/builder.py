"""Beacon frame builder for pwngrid-style whisper advertisements.

This module handles serialization of the status record and splicing it,
chunk by chunk, behind the fixed beacon template.
"""

import json
import threading
import time
from typing import Callable

from common.chunking import chunk_count, iter_chunks
from common.config import StatusConfig
from common.logging_setup import get_logger
from framing.beacon import (
    BEACON_HEADER_SIZE,
    BEACON_TEMPLATE,
    CHUNK_HEADER_SIZE,
    CHUNK_SIZE,
    ID_WHISPER_PAYLOAD,
    MAX_FRAME_SIZE,
)
from transport.radio import Radio, RadioError

logger = get_logger(__name__)

# Substituted for anything outside printable ASCII
PLACEHOLDER = ord("?")

# Pause between pack and transmit
SEND_DELAY_S = 0.102


class FrameOverflowError(ValueError):
    """Raised when the packed frame would exceed the maximum frame size."""
    pass


def serialize_status(status: StatusConfig) -> bytes:
    """Encode the status record as compact JSON, in wire key order."""
    text = json.dumps(status.to_record(), separators=(",", ":"), ensure_ascii=False)
    return text.encode("utf-8")


def sanitize_payload(data: bytes) -> bytes:
    """Replace every byte outside printable ASCII with the placeholder."""
    return bytes(b if 0x20 <= b < 0x7F else PLACEHOLDER for b in data)


def tagged_length(length: int) -> int:
    """Bytes needed to carry length payload bytes as whisper chunks."""
    return length + CHUNK_HEADER_SIZE * chunk_count(length, CHUNK_SIZE)


def build_whisper_elements(payload: bytes) -> bytes:
    """
    Split payload into whisper payload elements.

    Each element is ``[0xDE][len][len bytes]`` with len <= 255. Payload
    bytes are sanitized on the way in.
    """
    out = bytearray()
    for chunk in iter_chunks(sanitize_payload(payload), CHUNK_SIZE):
        out.append(ID_WHISPER_PAYLOAD)
        out.append(len(chunk))
        out.extend(chunk)
    return bytes(out)


class FrameBuilder:
    """
    Builds and sends beacon frames carrying the current status.

    Every pack() returns a fresh buffer built from the status object as
    it is at that moment. The last one is kept in last_frame.
    """

    def __init__(
        self,
        status: StatusConfig,
        radio: Radio,
        interface: str = "wlan0",
        send_delay: float = SEND_DELAY_S,
        slack: int = CHUNK_SIZE,
        max_frame_size: int = MAX_FRAME_SIZE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the frame builder.

        Args:
            status: Status record read on every pack
            radio: Transmit primitive
            interface: Station interface to transmit on
            send_delay: Seconds to wait between pack and transmit
            slack: Zero bytes reserved after the last chunk, trimmed to fit
            max_frame_size: Largest buffer pack() may return
            sleep: Sleep function (injectable for tests)
        """
        if slack < 0:
            raise ValueError(f"slack must be >= 0, got {slack}")
        self.status = status
        self.radio = radio
        self.interface = interface
        self.send_delay = send_delay
        self.slack = slack
        self.max_frame_size = max_frame_size
        self._sleep = sleep
        self._lock = threading.Lock()
        self.last_frame = b""

    def serialize(self) -> bytes:
        """Serialize the current status record."""
        return serialize_status(self.status)

    def pack(self) -> bytes:
        """
        Build the transmit buffer for the current status.

        The whole buffer, slack included, never exceeds max_frame_size.
        Slack is trimmed to whatever room the chunks leave.

        Returns:
            Beacon template + whisper chunks + slack

        Raises:
            FrameOverflowError: If template + chunks exceed max_frame_size
        """
        payload = self.serialize()
        frame_size = BEACON_HEADER_SIZE + tagged_length(len(payload))
        if frame_size > self.max_frame_size:
            raise FrameOverflowError(
                f"Frame too large: {frame_size} bytes, maximum {self.max_frame_size}"
            )

        slack = min(self.slack, self.max_frame_size - frame_size)
        buffer = bytearray(frame_size + slack)
        buffer[:BEACON_HEADER_SIZE] = BEACON_TEMPLATE
        buffer[BEACON_HEADER_SIZE:frame_size] = build_whisper_elements(payload)

        self.last_frame = bytes(buffer)
        logger.debug(
            f"Packed {len(payload)} byte payload into "
            f"{chunk_count(len(payload))} chunk(s), {len(buffer)} bytes total"
        )
        return self.last_frame

    def send(self) -> bool:
        """
        Pack the current status, wait send_delay, then transmit it.

        Returns:
            True if the radio accepted the frame, False otherwise
        """
        with self._lock:
            frame = self.pack()
            self._sleep(self.send_delay)
            try:
                ok = self.radio.transmit(self.interface, frame, append_header=False)
            except (RadioError, OSError) as e:
                logger.error(f"Radio error while sending beacon: {e}")
                return False

        if not ok:
            logger.warning(f"Beacon transmit failed on {self.interface}")
        return bool(ok)
