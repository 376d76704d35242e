"""
Payload locator: pulls the base64 btsnooz block out of a text report.

Android bug reports embed the Bluetooth snoop log between two marker lines:

    --- BEGIN:BTSNOOP_LOG_SUMMARY (12345 bytes in) ---
    <base64, wrapped over many lines>
    --- END:BTSNOOP_LOG_SUMMARY ---

This module only finds and base64-decodes that block; it does not look at
the decoded bytes.
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Iterable

from ..config import DecoderConfig
from ..errors import FormatError

logger = logging.getLogger(__name__)


def find_snoop_data(
    lines: Iterable[str],
    begin_marker: str = "--- BEGIN:BTSNOOP_LOG_SUMMARY",
    end_marker: str = "--- END:BTSNOOP_LOG_SUMMARY",
) -> str:
    """
    Return the concatenated base64 text between the marker lines.

    Lines are stripped of surrounding whitespace before joining. The marker
    lines themselves are not part of the result.

    Raises
    ------
    FormatError
        No begin marker at all, or a begin marker without a matching end marker.
    """
    it = iter(lines)
    for line in it:
        if line.startswith(begin_marker):
            break
    else:
        raise FormatError("BTSNOOP data not found")

    chunks: list[str] = []
    for line in it:
        if line.startswith(end_marker):
            return "".join(chunks)
        chunks.append(line.strip())
    raise FormatError("file truncated early, BTSNOOP trailer not found")


def decode_snoop_data(text: str) -> bytes:
    """Strict standard-alphabet base64 decode of the located block."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"BTSNOOP data is not valid base64: {exc}") from exc


def read_snooz_blob(path: str | Path, config: DecoderConfig | None = None) -> bytes:
    """Read a text report from disk and return the decoded btsnooz blob."""
    cfg = config or DecoderConfig()
    with open(path, "r", encoding=cfg.input_encoding, errors="replace") as f:
        text = find_snoop_data(f, cfg.begin_marker, cfg.end_marker)
    logger.debug("Located %d base64 characters in %s", len(text), path)
    return decode_snoop_data(text)
