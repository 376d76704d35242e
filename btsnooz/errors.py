"""
Exception hierarchy for the btsnooz decoder.

Everything raised on purpose by this package derives from SnoozError so the
command line can report it as a single line. Lower-level failures (base64,
zlib, struct) are translated at the boundary where they happen.
"""

from __future__ import annotations


class SnoozError(Exception):
    """Base class for all decoder failures."""


class UsageError(SnoozError):
    """Wrong command-line invocation."""


class FormatError(SnoozError, ValueError):
    """Input is not a well-formed btsnooz payload."""


class UnsupportedFeature(SnoozError, NotImplementedError):
    """Input is recognised but this decoder does not handle it."""
