"""Lightshow configuration.

A lightshow file is XML with the USB identifiers, the packet size and one
hex packet blob per command:

    <lightshow>
      <usbVendorId>4660</usbVendorId>
      <usbProductId>22136</usbProductId>
      <usbPacketByteLen>4</usbPacketByteLen>
      <downloadLightshowPackets>01,02,03,04</downloadLightshowPackets>
      <startLightshowPackets>...</startLightshowPackets>
      <pauseLightshowPackets>...</pauseLightshowPackets>
      <resumeLightshowPackets>...</resumeLightshowPackets>
    </lightshow>

Elements may be nested at any depth but must appear only once.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from .errors import ConfigError
from .models import MAX_PACKET_SIZE, MIN_PACKET_SIZE, Command, Packet
from .protocol.codec import make_break_packet, parse_packets

logger = logging.getLogger(__name__)

VENDOR_ID_TAG = "usbVendorId"
PRODUCT_ID_TAG = "usbProductId"
PACKET_SIZE_TAG = "usbPacketByteLen"

PACKET_TAGS: Dict[Command, str] = {
    Command.DOWNLOAD: "downloadLightshowPackets",
    Command.START: "startLightshowPackets",
    Command.STOP: "pauseLightshowPackets",
    Command.RESUME: "resumeLightshowPackets",
}


def parse_int(text: str, name: str, minimum: int, maximum: int) -> int:
    """Parse a decimal or 0x-prefixed integer and range-check it."""
    try:
        text = text.strip()
        value = int(text, 16 if text.lower().startswith("0x") else 10)
    except (ValueError, AttributeError):
        raise ConfigError(f"{name}: {text!r} is not an integer") from None

    if not minimum <= value <= maximum:
        raise ConfigError(f"{name}: {value} out of range {minimum}..{maximum}")
    return value


@dataclass(frozen=True)
class LightshowConfig:
    """Everything needed to run one transfer session.

    Attributes:
        vendor_id: USB Vendor ID
        product_id: USB Product ID
        packet_size: Bytes per packet (without the report-ID byte)
        command: Selected lightshow command
        packets: Data packets for the command
    """
    vendor_id: int
    product_id: int
    packet_size: int
    command: Command
    packets: List[Packet] = field(default_factory=list)

    @property
    def trailing_break(self) -> bool:
        return self.command.requests_trailing_break

    @property
    def break_packet(self) -> Packet:
        return make_break_packet(self.packet_size)

    @classmethod
    def from_values(
        cls,
        vendor_id: Union[int, str],
        product_id: Union[int, str],
        packet_size: Union[int, str],
        command: Command,
        payload: str,
    ) -> LightshowConfig:
        """Build a config from raw values (CLI arguments or XML text).

        Raises:
            ConfigError: If an ID or the packet size is invalid
            MalformedPayload: If the payload contains a bad hex token
        """
        vendor_id = parse_int(str(vendor_id), VENDOR_ID_TAG, 0, 0xFFFF)
        product_id = parse_int(str(product_id), PRODUCT_ID_TAG, 0, 0xFFFF)
        packet_size = parse_int(str(packet_size), PACKET_SIZE_TAG, MIN_PACKET_SIZE, MAX_PACKET_SIZE)

        return cls(
            vendor_id=vendor_id,
            product_id=product_id,
            packet_size=packet_size,
            command=command,
            packets=parse_packets(payload, packet_size),
        )


def _single_text(root: ET.Element, tag: str) -> str:
    matches = list(root.iter(tag))
    if not matches:
        raise ConfigError(f"Missing <{tag}> element")
    if len(matches) > 1:
        raise ConfigError(f"Duplicate <{tag}> element ({len(matches)} found)")
    return matches[0].text or ""


def load_config(path: Union[str, Path], command: Command) -> LightshowConfig:
    """Load a lightshow XML file for one command.

    Raises:
        ConfigError: If the file is missing, not XML or incomplete
        MalformedPayload: If the packet blob contains a bad hex token
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Invalid input file path: {path}")

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ConfigError(f"Error parsing xml input file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading input file {path}: {e}") from e

    config = LightshowConfig.from_values(
        vendor_id=_single_text(root, VENDOR_ID_TAG),
        product_id=_single_text(root, PRODUCT_ID_TAG),
        packet_size=_single_text(root, PACKET_SIZE_TAG),
        command=command,
        payload=_single_text(root, PACKET_TAGS[command]),
    )
    logger.debug(
        f"Loaded {path}: {command.value}, {len(config.packets)} packet(s) "
        f"of {config.packet_size} bytes"
    )
    return config
