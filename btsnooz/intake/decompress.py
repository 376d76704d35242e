"""
Container parser and payload inflater.

btsnooz container layout (all offsets in bytes):

    0       version            u8
    1..8    reference ts (ms)  u64, little-endian; timestamp of the LAST record
    9..10   zlib header        skipped
    11..    raw deflate stream

This module does not interpret the decompressed records; it only hands back
the inflated bytes.
"""

from __future__ import annotations

import struct
import zlib
from typing import Final, Tuple

from ..dto import SnoozContainer
from ..errors import FormatError

_HEADER: Final[struct.Struct] = struct.Struct("<BQ")

# 9-byte header, then the two zlib header bytes that a raw inflater does not consume
PAYLOAD_OFFSET: Final[int] = _HEADER.size + 2


def parse_container(blob: bytes) -> SnoozContainer:
    """
    Split a decoded btsnooz blob into its header fields and compressed payload.

    Raises
    ------
    FormatError
        If the blob is shorter than the fixed prefix.
    """
    if len(blob) < PAYLOAD_OFFSET:
        raise FormatError(
            f"btsnooz container too short ({len(blob)} bytes, need at least {PAYLOAD_OFFSET})"
        )
    version, reference_ts = _HEADER.unpack_from(blob, 0)
    return SnoozContainer(
        version=version,
        reference_timestamp_ms=reference_ts,
        payload=bytes(blob[PAYLOAD_OFFSET:]),
    )


def inflate(payload: bytes) -> bytes:
    """
    Inflate a raw deflate stream (no zlib header, no checksum check).

    A stream that is corrupt or ends before its final block is a FormatError.
    Trailing bytes after the final block (the zlib adler32) are ignored.
    """
    d = zlib.decompressobj(-zlib.MAX_WBITS)
    try:
        out = d.decompress(payload)
        out += d.flush()
    except zlib.error as exc:
        raise FormatError(f"corrupt compressed data: {exc}") from exc
    if not d.eof:
        raise FormatError("corrupt compressed data: stream ended before the final block")
    return out


def open_container(blob: bytes) -> Tuple[SnoozContainer, bytes]:
    """Parse the header and inflate the payload in one go."""
    container = parse_container(blob)
    return container, inflate(container.payload)
