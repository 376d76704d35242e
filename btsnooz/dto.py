"""
Data Transfer Objects (DTOs) used across the decoder.

These are intentionally small, immutable, and independent of any I/O.
"""

from __future__ import annotations

from dataclasses import dataclass


# === Intake ===
@dataclass(frozen=True)
class SnoozContainer:
    """Fixed-layout btsnooz header plus the still-compressed payload."""
    version: int                 # record layout version (1 or 2)
    reference_timestamp_ms: int  # timestamp of the LAST record, source epoch
    payload: bytes               # raw deflate stream (zlib header already skipped)


# === Input record (version 2) ===
@dataclass(frozen=True)
class SnoozRecord:
    """One compact record from the decompressed stream."""
    frame_length: int     # body length with the folded type byte
    captured_length: int  # carried through unchanged
    delta_ms: int         # offset from the previous record's timestamp
    packet_type: int      # stack-internal type code
    body: bytes           # exactly frame_length - 1 bytes
    offset: int = 0       # position of the header within the stream


# === Output record ===
@dataclass(frozen=True)
class SnoopRecord:
    """btsnoop record ready for encoding."""
    original_length: int
    included_length: int
    flags: int          # bit 0: 1 = received, 0 = sent
    drops: int
    timestamp_us: int   # signed 64-bit, btsnoop epoch
    hci_type: int       # H4 packet indicator
    body: bytes
