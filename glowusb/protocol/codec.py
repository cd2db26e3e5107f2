"""Packet codec for lightshow payloads.

Turns a delimited blob of hexadecimal byte literals into fixed-size packets.
Pure functions with no side effects other than logging.
"""
from __future__ import annotations

import logging
import re
from typing import List, Sequence

from ..errors import InvalidPacketSize, MalformedPayload
from ..models import Packet

logger = logging.getLogger(__name__)

BREAK_BYTE = 0xFF

_SEPARATORS = re.compile(r"[,\s]+")
_HEX_TOKEN = re.compile(r"(?:0[xX])?[0-9A-Fa-f]+")


def parse_tokens(text: str) -> List[int]:
    """Parse a comma, space or line-break separated blob of hex bytes.

    Args:
        text: Blob like "FF,00, AA\\nBB" (an optional 0x prefix is accepted)

    Returns:
        List of byte values in input order

    Raises:
        MalformedPayload: If any token is not a hex value in 0..255

    Examples:
        >>> parse_tokens("FF,00 0a")
        [255, 0, 10]
    """
    values = []
    for index, token in enumerate(t for t in _SEPARATORS.split(text) if t):
        if not _HEX_TOKEN.fullmatch(token):
            raise MalformedPayload(
                f"Invalid hex byte {token!r} at position {index}",
                token=token,
                index=index,
            )
        value = int(token, 16)
        if not 0 <= value <= 0xFF:
            raise MalformedPayload(
                f"Hex value {token!r} at position {index} does not fit in a byte",
                token=token,
                index=index,
            )
        values.append(value)
    return values


def chunk(tokens: Sequence[int], packet_size: int) -> List[Packet]:
    """Group byte values into packets of exactly `packet_size` bytes.

    A final run shorter than `packet_size` is dropped, not padded.

    Raises:
        InvalidPacketSize: If packet_size is not a positive integer
        MalformedPayload: If a value does not fit in a byte
    """
    if isinstance(packet_size, bool) or not isinstance(packet_size, int) or packet_size <= 0:
        raise InvalidPacketSize(f"Packet size must be a positive integer, got {packet_size!r}")

    try:
        data = bytes(tokens)
    except (ValueError, TypeError) as e:
        raise MalformedPayload(f"Payload values must be bytes (0..255): {e}") from None

    whole = len(data) - len(data) % packet_size
    return [data[i:i + packet_size] for i in range(0, whole, packet_size)]


def parse_packets(text: str, packet_size: int) -> List[Packet]:
    """Parse a hex blob and chunk it into packets."""
    tokens = parse_tokens(text)
    packets = chunk(tokens, packet_size)

    dropped = len(tokens) - len(packets) * packet_size
    if dropped:
        logger.warning(
            f"Dropping {dropped} trailing byte(s): payload length {len(tokens)} "
            f"is not a multiple of packet size {packet_size}"
        )
    return packets


def make_break_packet(packet_size: int) -> Packet:
    """Build the break packet (all 0xFF) for the given packet size."""
    if isinstance(packet_size, bool) or not isinstance(packet_size, int) or packet_size <= 0:
        raise InvalidPacketSize(f"Packet size must be a positive integer, got {packet_size!r}")
    return bytes([BREAK_BYTE]) * packet_size
