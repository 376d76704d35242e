"""
Version-2 record decoder.

The container only stores the timestamp of the LAST record; every record
carries the delta from its predecessor. Recovering forward timestamps
therefore takes two passes over the stream:

1. `first_timestamp_ms`: start from the reference timestamp (shifted into
   the btsnoop epoch) and subtract every delta. What is left is the
   timestamp "before" the first record's delta is applied.
2. `iter_timestamped`: walk again, adding each delta before emitting, which
   reproduces every record's absolute timestamp in order.

Both passes read through `iter_records`, so a misaligned stream fails the
same way in either of them.
"""

from __future__ import annotations

import logging
import struct
from typing import Final, Iterator, Tuple

from ..dto import SnoopRecord, SnoozRecord
from ..ports import RecordSinkPort
from .classify import direction, hci_type
from .records import iter_records

logger = logging.getLogger(__name__)

# Shifts btsnooz reference timestamps into the btsnoop epoch (0000-01-01).
EPOCH_OFFSET_MS: Final[int] = 0x00DCDDB30F2F8000

_U64_MASK: Final[int] = (1 << 64) - 1


def _to_int64(value: int) -> int:
    """Wrap to a signed 64-bit value the way fixed-width accumulation would."""
    value &= _U64_MASK
    return value - (1 << 64) if value >= (1 << 63) else value


# === Pass 1 ===


def first_timestamp_ms(decompressed: bytes, reference_timestamp_ms: int) -> int:
    """Walk the whole stream backwards in time to the first record's base timestamp."""
    ts = reference_timestamp_ms + EPOCH_OFFSET_MS
    for rec in iter_records(decompressed):
        ts -= rec.delta_ms
    return ts


# === Pass 2 ===


def iter_timestamped(decompressed: bytes, first_ts_ms: int) -> Iterator[Tuple[SnoozRecord, int]]:
    """Yield (record, absolute timestamp) pairs in stream order."""
    ts = first_ts_ms
    for rec in iter_records(decompressed):
        ts += rec.delta_ms
        yield rec, ts


def to_snoop_record(rec: SnoozRecord, timestamp_ms: int) -> SnoopRecord:
    """Map one btsnooz record onto the btsnoop record layout."""
    return SnoopRecord(
        original_length=rec.captured_length,
        included_length=rec.frame_length,
        flags=direction(rec.packet_type),
        drops=0,
        timestamp_us=_to_int64(timestamp_ms),
        hci_type=hci_type(rec.packet_type),
        body=rec.body,
    )


def decode_v2(decompressed: bytes, reference_timestamp_ms: int, sink: RecordSinkPort) -> int:
    """
    Decode a version-2 stream into `sink`.

    Writes the file header, then one record per input record. Returns the
    number of records written.
    """
    first_ts = first_timestamp_ms(decompressed, reference_timestamp_ms)
    logger.debug("First record base timestamp: %d", first_ts)

    sink.write_header()
    count = 0
    for rec, ts in iter_timestamped(decompressed, first_ts):
        sink.write_record(to_snoop_record(rec, ts))
        count += 1
    return count


# === Encoding ===

SNOOP_RECORD_HEADER: Final[struct.Struct] = struct.Struct(">IIIIq")


def encode_snoop_record(record: SnoopRecord) -> bytes:
    """24-byte big-endian header, H4 indicator, then the body."""
    header = SNOOP_RECORD_HEADER.pack(
        record.original_length,
        record.included_length,
        record.flags,
        record.drops,
        record.timestamp_us,
    )
    return header + bytes((record.hci_type,)) + record.body
