"""
Basic input sniffing.

Goal: a fast, side-effect-free guess whether an input file is a text report
(base64 block between marker lines) or a bare btsnooz blob as pulled from a
device (`btsnooz_hci.log`). Nothing is parsed here; the container parser
does the real checks.
"""

from __future__ import annotations

import string
from pathlib import Path
from typing import Final

# Versions that may appear in byte 0 of a bare container
KNOWN_VERSIONS: Final[frozenset[int]] = frozenset({1, 2})

_PRINTABLE: Final[frozenset[int]] = frozenset(string.printable.encode("ascii"))

# version byte + u64 timestamp + zlib header
MIN_RAW_SIZE: Final[int] = 11


def _read_head(path: str | Path, n: int) -> bytes:
    with open(path, "rb") as f:
        return f.read(n)


def _looks_like_text(head: bytes) -> bool:
    return all(b in _PRINTABLE for b in head)


def looks_like_raw_snooz(head: bytes) -> bool:
    """
    True if `head` plausibly starts a bare btsnooz container.

    Checks:
    - At least the fixed 11-byte prefix is present.
    - Byte 0 is a known version (1 or 2); neither is a printable character,
      so a text report never matches.
    - The prefix is not entirely printable text.
    """
    if len(head) < MIN_RAW_SIZE:
        return False
    if head[0] not in KNOWN_VERSIONS:
        return False
    return not _looks_like_text(head[:16])


def is_raw_snooz_file(path: str | Path) -> bool:
    """Sniff the first bytes of a file on disk."""
    return looks_like_raw_snooz(_read_head(path, 16))
