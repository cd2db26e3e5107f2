"""Immutable data models shared by the device, protocol and transfer layers.

All models are frozen dataclasses or enums. They are the contract between
the device matcher, the transfer engine and the session orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .protocol.status import DeviceStatus

# A packet is an immutable run of exactly `packet_size` bytes.
Packet = bytes

MIN_PACKET_SIZE = 1
MAX_PACKET_SIZE = 255


@dataclass(frozen=True)
class HidDeviceInfo:
    """One enumerated HID interface as reported by the host.

    Attributes:
        vendor_id: USB Vendor ID
        product_id: USB Product ID
        path: Opaque OS path used to open the device
        manufacturer: USB manufacturer string, if available
        product: USB product string, if available
        serial_number: USB serial string, if available
        interface_number: USB interface number, or -1 if unknown
    """
    vendor_id: int
    product_id: int
    path: bytes
    manufacturer: Optional[str] = None
    product: Optional[str] = None
    serial_number: Optional[str] = None
    interface_number: int = -1

    @property
    def usb_id(self) -> str:
        """VID:PID string, e.g. '1234:5678'."""
        return f"{self.vendor_id:04X}:{self.product_id:04X}"


@dataclass(frozen=True)
class ReportCapabilities:
    """Report byte lengths of an opened HID device.

    Lengths include the leading report-ID byte.
    """
    input_report_length: int
    output_report_length: int
    feature_report_length: int = 0


class Command(Enum):
    """Lightshow command selecting which packet blob is transferred."""
    DOWNLOAD = "download"
    START = "start"
    STOP = "stop"
    RESUME = "resume"

    @property
    def requests_trailing_break(self) -> bool:
        """Only a download is closed with a second break packet."""
        return self is Command.DOWNLOAD


class PacketOutcome(Enum):
    """Result of sending one packet."""
    SENT = "sent"
    BUSY_RETRIED = "busy_retried"
    FAILED = "failed"


@dataclass(frozen=True)
class PacketResult:
    """Outcome of one break or data packet exchange.

    Attributes:
        outcome: SENT if ready on the first read, BUSY_RETRIED otherwise
        polls: Number of input reports read
        status: Last decoded device status
    """
    outcome: PacketOutcome
    polls: int
    status: "DeviceStatus"

    @property
    def retries(self) -> int:
        """Number of re-polls after the first read."""
        return max(self.polls - 1, 0)


@dataclass(frozen=True)
class SessionResult:
    """Aggregate result of a transfer session.

    Attributes:
        attempted: Data packets attempted (including a failed one)
        succeeded: Data packets confirmed by the device
        total: Data packets in the session
        success: True if every stage completed
        failed_stage: "break", "data", "trailing_break" or None
        failed_index: 0-based index of the failed data packet, or None
        error: Terminal error, or None
    """
    attempted: int
    succeeded: int
    total: int
    success: bool
    failed_stage: Optional[str] = None
    failed_index: Optional[int] = None
    error: Optional[Exception] = None

    def summary(self) -> str:
        return f"{self.succeeded} out of {self.total} data-packets sent."
