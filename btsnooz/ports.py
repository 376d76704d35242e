"""
Hexagonal interfaces (Ports) for the decoder.

The decoder only talks to a sink; where the bytes end up (file, memory,
socket) is the adapter's business. Keep this small so it is easy to fake
in tests.
"""

from __future__ import annotations

from typing import Protocol

from .dto import SnoopRecord


class RecordSinkPort(Protocol):
    """
    Receives the btsnoop file header once, then records in stream order.
    """

    def write_header(self) -> None:
        """Emit the 16-byte file preamble. Called exactly once, before any record."""
        ...

    def write_record(self, record: SnoopRecord) -> None:
        """Append one encoded record."""
        ...
