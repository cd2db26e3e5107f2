"""GlowUSB - lightshow transfer to USB HID controllers."""

__version__ = "1.0.0"

from .errors import (
    GlowUSBError,
    InvalidPacketSize,
    MalformedPayload,
    ConfigError,
    LengthMismatch,
    DeviceNotFoundError,
    TransferFailed,
    HidIOError,
    BusyTimeout,
)
from .models import (
    Command,
    HidDeviceInfo,
    Packet,
    PacketOutcome,
    PacketResult,
    ReportCapabilities,
    SessionResult,
)

__all__ = [
    "__version__",
    "GlowUSBError",
    "InvalidPacketSize",
    "MalformedPayload",
    "ConfigError",
    "LengthMismatch",
    "DeviceNotFoundError",
    "TransferFailed",
    "HidIOError",
    "BusyTimeout",
    "Command",
    "HidDeviceInfo",
    "Packet",
    "PacketOutcome",
    "PacketResult",
    "ReportCapabilities",
    "SessionResult",
]
