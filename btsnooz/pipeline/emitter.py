"""
btsnoop writer.

Purpose
-------
Turn SnoopRecord objects into the btsnoop byte layout and push them into a
binary file-like object. The file header goes out exactly once, before any
record, whether or not records follow.

File header (16 bytes, big-endian):

    magic      b"btsnoop\\0"
    version    u32 = 1
    datalink   u32 = 1002 (HCI UART / H4)

Output files
------------
`open_output(path, atomic=True)` buffers into a temporary file next to the
target and renames it into place only when the block exits cleanly, so a
failed run leaves no half-written capture. With `atomic=False` bytes go
straight to `path` and whatever was written before a failure stays there.
"""

from __future__ import annotations

import logging
import os
import struct
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Final, Generator

from ..dto import SnoopRecord
from ..ports import RecordSinkPort
from .decoder_v2 import encode_snoop_record

logger = logging.getLogger(__name__)

SNOOP_MAGIC: Final[bytes] = b"btsnoop\x00"
SNOOP_VERSION: Final[int] = 1
DATALINK_HCI_UART: Final[int] = 1002

FILE_HEADER: Final[bytes] = SNOOP_MAGIC + struct.pack(">II", SNOOP_VERSION, DATALINK_HCI_UART)


class BtsnoopWriter(RecordSinkPort):
    """
    Record sink writing btsnoop bytes into `fp`.

    Parameters
    ----------
    fp : BinaryIO
        Writable binary stream; the writer does not close it.
    """

    def __init__(self, fp: BinaryIO) -> None:
        self._fp = fp
        self._header_written = False

    # --- emission ---

    def write_header(self) -> None:
        """Emit the 16-byte preamble; a second call is a programming error."""
        if self._header_written:
            raise RuntimeError("btsnoop header already written")
        self._fp.write(FILE_HEADER)
        self._header_written = True

    def write_record(self, record: SnoopRecord) -> None:
        """Encode and append one record."""
        if not self._header_written:
            raise RuntimeError("btsnoop header must be written before records")
        self._fp.write(encode_snoop_record(record))


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


@contextmanager
def open_output(path: str | Path, *, atomic: bool = True) -> Generator[BtsnoopWriter, None, None]:
    """Context manager yielding a BtsnoopWriter bound to `path`."""
    target = Path(path)
    if not atomic:
        with open(target, "wb") as f:
            yield BtsnoopWriter(f)
        return

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            yield BtsnoopWriter(f)
        # mkstemp creates 0600; give the capture the mode a plain open() would
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, target)
    except BaseException:
        logger.debug("Discarding partial output %s", tmp_name)
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
