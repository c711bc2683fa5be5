"""Chunking helpers for whisper payloads."""

from typing import Iterable

# Element length is a single byte
CHUNK_SIZE = 0xFF


def clamp_chunk_size(chunk_size: int) -> int:
    """Clamp chunk size to what a one-byte element length can describe."""
    if chunk_size <= 0:
        return CHUNK_SIZE
    return min(chunk_size, CHUNK_SIZE)


def iter_chunks(data: bytes, chunk_size: int = CHUNK_SIZE) -> Iterable[bytes]:
    """Yield data chunks of at most chunk_size bytes."""
    size = clamp_chunk_size(chunk_size)
    for i in range(0, len(data), size):
        yield data[i:i + size]


def chunk_count(length: int, chunk_size: int = CHUNK_SIZE) -> int:
    """Number of chunks iter_chunks yields for length bytes."""
    size = clamp_chunk_size(chunk_size)
    return -(-length // size)
