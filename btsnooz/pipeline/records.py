"""
Record reader: walks a decompressed version-2 stream record by record.

The stream has no index or outer length; each record's size is only known
after reading its header, so traversal is strictly sequential. A caller that
needs two passes simply builds the iterator twice.

Version-2 record header (little-endian, 9 bytes):

    frame_length     u16   body length including the folded type byte
    captured_length  u16
    delta_ms         u32   offset from the previous record
    packet_type      u8

followed by `frame_length - 1` body bytes.
"""

from __future__ import annotations

import struct
from typing import Final, Iterator, Tuple

from ..dto import SnoozRecord
from ..errors import FormatError

RECORD_HEADER: Final[struct.Struct] = struct.Struct("<HHIB")
RECORD_HEADER_LEN: Final[int] = RECORD_HEADER.size  # 9


def read_record(buf: bytes, offset: int) -> Tuple[SnoozRecord, int]:
    """
    Parse the record starting at `offset`.

    Returns the record and the offset of the next one.

    Raises
    ------
    FormatError
        Header or body would run past the end of `buf`, or frame_length is 0
        (it must at least cover the type byte).
    """
    end = len(buf)
    if offset + RECORD_HEADER_LEN > end:
        raise FormatError(
            f"truncated record header at offset {offset} "
            f"({end - offset} bytes left, need {RECORD_HEADER_LEN})"
        )
    frame_length, captured_length, delta_ms, packet_type = RECORD_HEADER.unpack_from(buf, offset)
    if frame_length == 0:
        raise FormatError(f"record at offset {offset} has zero frame length")

    body_start = offset + RECORD_HEADER_LEN
    body_end = body_start + frame_length - 1
    if body_end > end:
        raise FormatError(
            f"record at offset {offset} overruns the stream "
            f"(body ends at {body_end}, stream is {end} bytes)"
        )

    rec = SnoozRecord(
        frame_length=frame_length,
        captured_length=captured_length,
        delta_ms=delta_ms,
        packet_type=packet_type,
        body=bytes(buf[body_start:body_end]),
        offset=offset,
    )
    return rec, body_end


def iter_records(buf: bytes) -> Iterator[SnoozRecord]:
    """
    Lazily yield every record in `buf`, in stream order.

    Stops exactly at the end of the buffer; a stream whose records do not
    line up with its end raises FormatError from read_record.
    """
    offset = 0
    end = len(buf)
    while offset < end:
        rec, offset = read_record(buf, offset)
        yield rec
