"""
Packet type classification.

btsnooz records carry the Bluetooth stack's internal packet type code. The
btsnoop output needs two things derived from it:

- the direction bit of the record flags (1 = received, 0 = sent)
- the one-byte H4 packet indicator prepended to the body

Direction lookup never fails (unknown codes count as sent); the H4 lookup is
the one that rejects unknown codes.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

from ..errors import FormatError

# Stack-internal type codes
TYPE_IN_EVT: Final[int] = 0x10
TYPE_IN_ACL: Final[int] = 0x11
TYPE_IN_SCO: Final[int] = 0x12
TYPE_OUT_CMD: Final[int] = 0x20
TYPE_OUT_ACL: Final[int] = 0x21
TYPE_OUT_SCO: Final[int] = 0x22

# H4 packet indicators
HCI_COMMAND: Final[int] = 0x01
HCI_ACL: Final[int] = 0x02
HCI_SCO: Final[int] = 0x03
HCI_EVENT: Final[int] = 0x04

DIRECTION_SENT: Final[int] = 0
DIRECTION_RECEIVED: Final[int] = 1

INBOUND_TYPES: Final[frozenset[int]] = frozenset({TYPE_IN_EVT, TYPE_IN_ACL, TYPE_IN_SCO})

HCI_TYPES: Final[Mapping[int, int]] = MappingProxyType(
    {
        TYPE_OUT_CMD: HCI_COMMAND,
        TYPE_IN_ACL: HCI_ACL,
        TYPE_OUT_ACL: HCI_ACL,
        TYPE_IN_SCO: HCI_SCO,
        TYPE_OUT_SCO: HCI_SCO,
        TYPE_IN_EVT: HCI_EVENT,
    }
)


def direction(packet_type: int) -> int:
    """Return 1 for received packets, 0 otherwise."""
    return DIRECTION_RECEIVED if packet_type in INBOUND_TYPES else DIRECTION_SENT


def hci_type(packet_type: int) -> int:
    """Return the H4 packet indicator for a btsnooz packet type."""
    try:
        return HCI_TYPES[packet_type]
    except KeyError:
        raise FormatError(f"unsupported packet type (0x{packet_type:02x})") from None
