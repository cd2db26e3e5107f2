"""Exception taxonomy for glowusb.

Configuration and payload errors are raised before any device I/O.
DeviceNotFoundError and BusyTimeout are expected, user-actionable outcomes.
"""
from __future__ import annotations

from typing import Optional


class GlowUSBError(Exception):
    """Base class for all glowusb errors."""
    pass


class InvalidPacketSize(GlowUSBError, ValueError):
    """Raised when the configured packet size is not a positive integer."""
    pass


class MalformedPayload(GlowUSBError, ValueError):
    """Raised when a payload token is not a valid hexadecimal byte."""

    def __init__(self, message: str, token: Optional[str] = None, index: Optional[int] = None):
        super().__init__(message)
        self.token = token
        self.index = index


class ConfigError(GlowUSBError):
    """Raised when the lightshow configuration is missing or invalid."""
    pass


class LengthMismatch(GlowUSBError):
    """Raised when a report buffer does not match the channel's report length."""

    def __init__(self, message: str, expected: int, actual: int):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DeviceNotFoundError(GlowUSBError):
    """Raised when no usable HID device matches the vendor/product IDs."""

    def __init__(self, vendor_id: int, product_id: int, message: Optional[str] = None):
        if message is None:
            message = (
                f"No usable HID device found "
                f"(VendorID 0x{vendor_id:04X}, ProductID 0x{product_id:04X})"
            )
        super().__init__(message)
        self.vendor_id = vendor_id
        self.product_id = product_id


class TransferFailed(GlowUSBError):
    """Raised when a packet exchange cannot be completed.

    Attributes:
        packet_index: Index of the data packet that failed, if known.
        stage: Session stage ("break", "data", "trailing_break"), if known.
    """

    def __init__(self, message: str, packet_index: Optional[int] = None, stage: Optional[str] = None):
        super().__init__(message)
        self.packet_index = packet_index
        self.stage = stage


class HidIOError(TransferFailed):
    """Raised when a HID open, write, read or capability query fails."""
    pass


class BusyTimeout(TransferFailed):
    """Raised when the device is still busy after the poll limit."""

    def __init__(self, message: str, polls: int, **kwargs):
        super().__init__(message, **kwargs)
        self.polls = polls
