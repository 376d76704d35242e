"""
Version dispatch: route decompressed bytes to the decoder for their layout.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Final, Mapping

from ..errors import FormatError, UnsupportedFeature
from ..ports import RecordSinkPort
from .decoder_v2 import decode_v2

Decoder = Callable[[bytes, int, RecordSinkPort], int]

VERSION_1: Final[int] = 1
VERSION_2: Final[int] = 2


def _decode_v1(decompressed: bytes, reference_timestamp_ms: int, sink: RecordSinkPort) -> int:
    raise UnsupportedFeature("btsnooz version 1 is not supported")


DECODERS: Final[Mapping[int, Decoder]] = MappingProxyType(
    {
        VERSION_1: _decode_v1,
        VERSION_2: decode_v2,
    }
)


def dispatch(version: int, decompressed: bytes, reference_timestamp_ms: int, sink: RecordSinkPort) -> int:
    """Decode `decompressed` with the decoder registered for `version`; returns the record count."""
    decoder = DECODERS.get(version)
    if decoder is None:
        raise FormatError(f"invalid data or unsupported version ({version})")
    return decoder(decompressed, reference_timestamp_ms, sink)
