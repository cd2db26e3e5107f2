"""Abstract base class for HID backends.

The HidBackend interface is the boundary to the operating system's HID
stack. Implementations enumerate devices, open handles by path and perform
raw report I/O. They do not interpret reports.

Key principles:
- Handles are opaque to callers
- Every failure is raised as HidIOError
- Enumeration is lazy and unbounded
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable

from ..models import HidDeviceInfo, ReportCapabilities

MODE_READ = "read"
MODE_WRITE = "write"


class HidBackend(ABC):
    """Abstract HID access interface.

    Backends are responsible for:
    1. Listing HID interfaces present on the host
    2. Opening and closing device handles
    3. Querying report lengths
    4. Writing output reports and reading input reports
    """

    @abstractmethod
    def enumerate(self) -> Iterable[HidDeviceInfo]:
        """Yield a descriptor for every HID interface on the host."""
        pass

    @abstractmethod
    def open(self, path: bytes, mode: str) -> Any:
        """Open a handle on a device path.

        Args:
            path: Device path from enumerate()
            mode: MODE_READ or MODE_WRITE

        Returns:
            Opaque handle

        Raises:
            HidIOError: If the device cannot be opened
        """
        pass

    @abstractmethod
    def close(self, handle: Any) -> None:
        """Close a handle. Should be safe to call on a failed handle."""
        pass

    @abstractmethod
    def query_capabilities(self, handle: Any) -> ReportCapabilities:
        """Return the report byte lengths of an opened device.

        Raises:
            HidIOError: If the capabilities cannot be determined
        """
        pass

    @abstractmethod
    def write_report(self, handle: Any, data: bytes) -> None:
        """Write one output report (first byte is the report ID).

        Raises:
            HidIOError: If the write fails or is short
        """
        pass

    @abstractmethod
    def read_report(self, handle: Any, length: int) -> bytes:
        """Read one input report of `length` bytes (report ID first).

        Raises:
            HidIOError: If the read fails
        """
        pass
