from __future__ import annotations

import io
import struct
from itertools import accumulate
from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from conftest import pack_record, pack_stream
from btsnooz.dto import SnoopRecord
from btsnooz.errors import FormatError
from btsnooz.pipeline.decoder_v2 import (
    EPOCH_OFFSET_MS,
    decode_v2,
    encode_snoop_record,
    first_timestamp_ms,
    iter_timestamped,
    to_snoop_record,
)
from btsnooz.pipeline.emitter import FILE_HEADER, BtsnoopWriter
from btsnooz.pipeline.records import read_record

TYPES = [0x10, 0x11, 0x12, 0x20, 0x21, 0x22]


class ListSink:
    def __init__(self) -> None:
        self.headers = 0
        self.records: List[SnoopRecord] = []

    def write_header(self) -> None:
        self.headers += 1

    def write_record(self, record: SnoopRecord) -> None:
        self.records.append(record)


def test_epoch_offset_value():
    assert EPOCH_OFFSET_MS == 0x00DCDDB30F2F8000


def test_first_timestamp_subtracts_every_delta():
    buf = pack_stream([(0x20, 3, b"\x00"), (0x10, 10, b"\x00"), (0x11, 100, b"")])
    assert first_timestamp_ms(buf, 1_000) == 1_000 + EPOCH_OFFSET_MS - 113


def test_forward_pass_ends_on_reference():
    buf = pack_stream([(0x20, 3, b"\x00"), (0x10, 10, b"\x00"), (0x11, 100, b"")])
    first = first_timestamp_ms(buf, 5_000)
    stamps = [ts for _, ts in iter_timestamped(buf, first)]
    assert stamps == [first + 3, first + 13, first + 113]
    assert stamps[-1] == 5_000 + EPOCH_OFFSET_MS


@settings(max_examples=150, deadline=None)
@given(
    reference=st.integers(min_value=0, max_value=2**48),
    recs=st.lists(
        st.tuples(
            st.sampled_from(TYPES),
            st.integers(min_value=0, max_value=2**32 - 1),
            st.binary(min_size=0, max_size=32),
        ),
        max_size=40,
    ),
)
def test_two_pass_matches_direct_forward_sum(reference, recs):
    buf = pack_stream(recs)
    deltas = [d for _, d, _ in recs]
    true_first = reference + EPOCH_OFFSET_MS - sum(deltas)
    expected = [true_first + s for s in accumulate(deltas)]

    first = first_timestamp_ms(buf, reference)
    assert first == true_first
    got = [ts for _, ts in iter_timestamped(buf, first)]
    assert got == expected

    sink = ListSink()
    assert decode_v2(buf, reference, sink) == len(recs)
    assert sink.headers == 1
    assert [r.timestamp_us for r in sink.records] == expected
    assert [r.body for r in sink.records] == [b for _, _, b in recs]


def test_to_snoop_record_maps_lengths_and_type():
    rec, _ = read_record(pack_record(0x12, 0, b"\x01\x02", captured_length=9), 0)
    out = to_snoop_record(rec, 1234)
    assert out.original_length == 9
    assert out.included_length == 3
    assert out.flags == 1
    assert out.drops == 0
    assert out.timestamp_us == 1234
    assert out.hci_type == 0x03
    assert out.body == b"\x01\x02"


def test_timestamp_wraps_to_signed_64_bits():
    rec, _ = read_record(pack_record(0x20, 0, b""), 0)
    assert to_snoop_record(rec, -1).timestamp_us == -1
    assert to_snoop_record(rec, 2**64 + 5).timestamp_us == 5
    assert to_snoop_record(rec, 2**63).timestamp_us == -(2**63)


def test_encode_layout():
    rec = SnoopRecord(
        original_length=5, included_length=5, flags=0, drops=0,
        timestamp_us=0x0102030405060708, hci_type=0x01, body=b"\x03\x0c\x00\x00",
    )
    raw = encode_snoop_record(rec)
    assert len(raw) == 24 + 1 + 4
    assert raw[:24] == struct.pack(">IIIIII", 5, 5, 0, 0, 0x01020304, 0x05060708)
    assert raw[24] == 0x01
    assert raw[25:] == b"\x03\x0c\x00\x00"


def test_single_command_record_end_to_end():
    reference = 1_700_000_000_000
    buf = pack_record(0x20, 0, b"\x03\x0c\x00\x00")
    out = io.BytesIO()
    assert decode_v2(buf, reference, BtsnoopWriter(out)) == 1

    data = out.getvalue()
    assert data[:16] == FILE_HEADER
    orig, incl, flags, drops, ts = struct.unpack_from(">IIIIq", data, 16)
    assert (orig, incl, flags, drops) == (5, 5, 0, 0)
    assert ts == reference + EPOCH_OFFSET_MS
    assert data[40] == 0x01
    assert data[41:] == b"\x03\x0c\x00\x00"


def test_empty_stream_writes_only_header():
    out = io.BytesIO()
    assert decode_v2(b"", 42, BtsnoopWriter(out)) == 0
    assert out.getvalue() == FILE_HEADER


def test_unknown_packet_type_fails():
    buf = pack_stream([(0x20, 0, b"\x00"), (0x33, 1, b"\x00")])
    with pytest.raises(FormatError, match="unsupported packet type"):
        decode_v2(buf, 0, ListSink())


@pytest.mark.parametrize("cut", [1, 5, 9, 13])
def test_misaligned_stream_fails_both_passes(cut):
    buf = pack_stream([(0x20, 1, b"\x01\x02\x03"), (0x10, 2, b"\x04\x05\x06")])
    bad = buf[:-cut]
    with pytest.raises(FormatError):
        first_timestamp_ms(bad, 0)
    with pytest.raises(FormatError):
        list(iter_timestamped(bad, 0))
    sink = ListSink()
    with pytest.raises(FormatError):
        decode_v2(bad, 0, sink)
    # pass 1 runs over the whole stream before anything is emitted
    assert sink.headers == 0
    assert sink.records == []
