# Ensure the repository root is importable even if pytest is invoked from a subfolder,
# and provide builders for in-memory btsnooz containers.
from __future__ import annotations

import base64
import struct
import sys
import zlib
from pathlib import Path
from typing import Iterable, Tuple

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
p = str(REPO_ROOT)
if p not in sys.path:
    sys.path.insert(0, p)

# (packet_type, delta_ms, body[, captured_length])
RecordSpec = Tuple


def pack_record(packet_type: int, delta_ms: int, body: bytes, captured_length: int | None = None) -> bytes:
    frame_length = len(body) + 1
    cap = frame_length if captured_length is None else captured_length
    return struct.pack("<HHIB", frame_length, cap, delta_ms, packet_type) + body


def pack_stream(records: Iterable[RecordSpec]) -> bytes:
    return b"".join(pack_record(*r) for r in records)


def pack_container(version: int, reference_ts: int, decompressed: bytes) -> bytes:
    # zlib.compress output starts with the 2-byte zlib header the container format skips
    return struct.pack("<BQ", version, reference_ts) + zlib.compress(decompressed)


def wrap_report(blob: bytes, *, line_width: int = 76, trailer: bool = True) -> str:
    b64 = base64.b64encode(blob).decode("ascii")
    lines = [b64[i:i + line_width] for i in range(0, len(b64), line_width)]
    out = [
        "== dumpsys bluetooth_manager ==",
        "Bluetooth Status",
        "--- BEGIN:BTSNOOP_LOG_SUMMARY (1234 bytes in) ---",
        *lines,
    ]
    if trailer:
        out.append("--- END:BTSNOOP_LOG_SUMMARY ---")
    out.append("== end of dumpsys ==")
    return "\n".join(out) + "\n"


@pytest.fixture
def make_report(tmp_path: Path):
    """Write a bug-report-like text file around a container and return its path."""
    def _make(blob: bytes, **kw) -> Path:
        path = tmp_path / "bugreport.txt"
        path.write_text(wrap_report(blob, **kw), encoding="latin-1")
        return path
    return _make
