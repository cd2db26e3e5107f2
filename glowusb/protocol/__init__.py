"""Protocol layer: payload codec and device status decoding."""

from .codec import chunk, make_break_packet, parse_packets, parse_tokens
from .status import DEFAULT_LAYOUT, DeviceStatus, StatusLayout

__all__ = [
    "chunk",
    "make_break_packet",
    "parse_packets",
    "parse_tokens",
    "DEFAULT_LAYOUT",
    "DeviceStatus",
    "StatusLayout",
]
