"""
Orchestration of one conversion: report (or bare blob) in, btsnoop out.

Order of operations:
1. Sniff the input: bare btsnooz blob or text report.
2. Text reports: locate and base64-decode the snoop block.
3. Parse the container header and inflate the payload.
4. Dispatch on version and decode into the output writer.

Any failure propagates; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import DecoderConfig
from .dto import SnoopRecord
from .intake.decompress import open_container
from .intake.locator import read_snooz_blob
from .intake.validator import is_raw_snooz_file
from .pipeline.dispatch import dispatch
from .pipeline.emitter import open_output
from .ports import RecordSinkPort
from .utils import snoop_ts_to_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """Summary of a finished run."""
    version: int
    records: int
    first_timestamp_us: Optional[int]
    last_timestamp_us: Optional[int]


class _SpanTracker(RecordSinkPort):
    """Pass-through sink that remembers the first/last timestamps it saw."""

    def __init__(self, inner: RecordSinkPort) -> None:
        self._inner = inner
        self.first: Optional[int] = None
        self.last: Optional[int] = None

    def write_header(self) -> None:
        self._inner.write_header()

    def write_record(self, record: SnoopRecord) -> None:
        if self.first is None:
            self.first = record.timestamp_us
        self.last = record.timestamp_us
        logger.debug(
            "record ts=%d flags=%d hci=0x%02x len=%d",
            record.timestamp_us, record.flags, record.hci_type, record.included_length,
        )
        self._inner.write_record(record)


def load_blob(input_path: str | Path, config: DecoderConfig) -> bytes:
    """Return the decoded btsnooz container bytes for a report or bare blob."""
    if is_raw_snooz_file(input_path):
        logger.info("Input %s looks like a bare btsnooz file", input_path)
        return Path(input_path).read_bytes()
    return read_snooz_blob(input_path, config)


def decode_blob(blob: bytes, sink: RecordSinkPort) -> ConversionResult:
    """Decode an in-memory btsnooz container into `sink`."""
    container, decompressed = open_container(blob)
    logger.info(
        "btsnooz version %d, %d bytes compressed, %d bytes decompressed",
        container.version, len(container.payload), len(decompressed),
    )
    tracker = _SpanTracker(sink)
    count = dispatch(container.version, decompressed, container.reference_timestamp_ms, tracker)
    return ConversionResult(
        version=container.version,
        records=count,
        first_timestamp_us=tracker.first,
        last_timestamp_us=tracker.last,
    )


def convert(
    input_path: str | Path,
    output_path: str | Path,
    config: DecoderConfig | None = None,
) -> ConversionResult:
    """Convert the btsnooz log inside `input_path` into a btsnoop file at `output_path`."""
    cfg = config or DecoderConfig()
    blob = load_blob(input_path, cfg)

    with open_output(output_path, atomic=cfg.atomic_output) as writer:
        result = decode_blob(blob, writer)

    if result.records and result.first_timestamp_us is not None and result.last_timestamp_us is not None:
        logger.info(
            "Wrote %d records to %s (%s .. %s)",
            result.records,
            output_path,
            snoop_ts_to_iso(result.first_timestamp_us),
            snoop_ts_to_iso(result.last_timestamp_us),
        )
    else:
        logger.info("Wrote empty capture to %s", output_path)
    return result
