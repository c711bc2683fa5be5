"""Beacon template and whisper element ids for pwngrid-style advertisements.

On-Wire Beacon Layout (byte layout):
====================================
| Offset | Size    | Field          | Value                              |
|--------|---------|----------------|------------------------------------|
| 0      | 2 bytes | frame control  | 80 00 (management, beacon)         |
| 2      | 2 bytes | duration       | 00 00                              |
| 4      | 6 bytes | destination    | ff:ff:ff:ff:ff:ff (broadcast)      |
| 10     | 6 bytes | source         | de:ad:be:ef:de:ad                  |
| 16     | 6 bytes | bssid          | a1:00:64:e6:0b:8b                  |
| 22     | 2 bytes | sequence ctrl  | 40 43                              |
| 24     | 8 bytes | timestamp      | zeroed                             |
| 32     | 2 bytes | interval       | 64 00 (100 TU)                     |
| 34     | 2 bytes | capability     | 11 04 (0x0411 LE)                  |
| 36     | N bytes | elements       | whisper chunks                     |
====================================

Whisper chunk:
- id: 1 byte (0xDE for payload)
- len: 1 byte (0-255)
- data: len bytes

pwngrid ignores beacons that carry none of the ids 0xDE-0xE2.
"""

import struct

from common.chunking import CHUNK_SIZE

# Element ids understood by pwngrid
ID_WHISPER_PAYLOAD = 0xDE
ID_WHISPER_COMPRESSION = 0xDF
ID_WHISPER_IDENTITY = 0xE0
ID_WHISPER_SIGNATURE = 0xE1
ID_WHISPER_STREAM_HEADER = 0xE2

WHISPER_IDS = (
    ID_WHISPER_PAYLOAD,
    ID_WHISPER_COMPRESSION,
    ID_WHISPER_IDENTITY,
    ID_WHISPER_SIGNATURE,
    ID_WHISPER_STREAM_HEADER,
)

BROADCAST_ADDR = b"\xff\xff\xff\xff\xff\xff"
SIGNATURE_ADDR = b"\xde\xad\xbe\xef\xde\xad"
BSSID_ADDR = b"\xa1\x00\x64\xe6\x0b\x8b"

# Capability info advertised by pwnagotchi units
WPA_FLAGS = 0x0411

FRAME_CONTROL_BEACON = 0x0080
SEQUENCE_CONTROL = 0x4340
BEACON_INTERVAL_TU = 100

# id + length
CHUNK_HEADER_SIZE = 2

# Largest buffer handed to the radio: MAC header, elements and slack
MAX_FRAME_SIZE = 2304


def mac_to_str(addr: bytes) -> str:
    """Format a 6-byte MAC address as colon separated hex."""
    return ":".join(f"{b:02x}" for b in addr)


BEACON_TEMPLATE = (
    struct.pack("<HH", FRAME_CONTROL_BEACON, 0)
    + BROADCAST_ADDR
    + SIGNATURE_ADDR
    + BSSID_ADDR
    + struct.pack("<HQHH", SEQUENCE_CONTROL, 0, BEACON_INTERVAL_TU, WPA_FLAGS)
)

BEACON_HEADER_SIZE = len(BEACON_TEMPLATE)
