"""
btsnooz: turn the btsnooz log embedded in Android bug reports into btsnoop.

Public API (stable):
- DecoderConfig            (configuration)
- convert                  (file in, file out)
- decode_blob              (in-memory container into any sink)
- RecordSinkPort           (output adapter interface)
- BtsnoopWriter            (btsnoop byte writer)
- DTOs: SnoozContainer, SnoozRecord, SnoopRecord
- Errors: SnoozError, UsageError, FormatError, UnsupportedFeature
"""

from __future__ import annotations

# Configuration
from .config import DecoderConfig

# Orchestration
from .runner import ConversionResult, convert, decode_blob

# Ports
from .ports import RecordSinkPort

# Adapters
from .pipeline.emitter import BtsnoopWriter

# DTOs
from .dto import SnoopRecord, SnoozContainer, SnoozRecord

# Errors
from .errors import FormatError, SnoozError, UnsupportedFeature, UsageError

__all__ = [
    "DecoderConfig",
    "ConversionResult",
    "convert",
    "decode_blob",
    "RecordSinkPort",
    "BtsnoopWriter",
    "SnoopRecord",
    "SnoozContainer",
    "SnoozRecord",
    "FormatError",
    "SnoozError",
    "UnsupportedFeature",
    "UsageError",
]

__version__ = "0.1.0"
