"""Opened HID channel to one device.

A channel owns a read handle and a write handle on the same device path
together with the device's report lengths. It does not interpret reports;
see glowusb.transfer.engine for the request/response protocol.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from ..errors import HidIOError, LengthMismatch
from ..models import HidDeviceInfo, ReportCapabilities
from .backend import HidBackend

logger = logging.getLogger(__name__)


class HidChannel:
    """Bidirectional, capability-described connection to one HID device.

    Report lengths are fixed when the channel is created. Every report
    written or read must match them exactly.

    Example:
        >>> with open_device(0x1234, 0x5678) as channel:
        ...     channel.write_output_report(bytes(channel.output_report_length))
        ...     report = channel.read_input_report()
    """

    def __init__(self,
                 backend: HidBackend,
                 info: HidDeviceInfo,
                 read_handle: Any,
                 write_handle: Any,
                 capabilities: ReportCapabilities):
        self._backend = backend
        self._info = info
        self._read_handle: Optional[Any] = read_handle
        self._write_handle: Optional[Any] = write_handle
        self._capabilities = capabilities

    @property
    def info(self) -> HidDeviceInfo:
        return self._info

    @property
    def vendor_id(self) -> int:
        return self._info.vendor_id

    @property
    def product_id(self) -> int:
        return self._info.product_id

    @property
    def capabilities(self) -> ReportCapabilities:
        return self._capabilities

    @property
    def input_report_length(self) -> int:
        return self._capabilities.input_report_length

    @property
    def output_report_length(self) -> int:
        return self._capabilities.output_report_length

    @property
    def is_open(self) -> bool:
        return self._read_handle is not None and self._write_handle is not None

    def check_output_length(self, report: bytes) -> None:
        """Raise LengthMismatch unless report fills an output report exactly."""
        if len(report) != self.output_report_length:
            raise LengthMismatch(
                f"Unexpected output report length "
                f"({len(report)} bytes, device expects {self.output_report_length})",
                expected=self.output_report_length,
                actual=len(report),
            )

    def write_output_report(self, report: bytes) -> None:
        """Write one output report, report-ID byte included.

        Raises:
            LengthMismatch: If the report length is wrong (nothing is sent)
            HidIOError: If the channel is closed or the write fails
        """
        self.check_output_length(report)
        if self._write_handle is None:
            raise HidIOError("Invalid device write handle (channel closed)")
        self._backend.write_report(self._write_handle, bytes(report))

    def read_input_report(self) -> bytes:
        """Read one input report of exactly input_report_length bytes.

        Raises:
            HidIOError: If the channel is closed, the read fails or is short
        """
        if self._read_handle is None:
            raise HidIOError("Invalid device read handle (channel closed)")

        report = self._backend.read_report(self._read_handle, self.input_report_length)
        if len(report) != self.input_report_length:
            raise HidIOError(
                f"Unexpected input report length "
                f"({len(report)} bytes, device declares {self.input_report_length})"
            )
        return report

    def close(self) -> None:
        """Release both handles. Safe to call multiple times."""
        for name in ("_read_handle", "_write_handle"):
            handle = getattr(self, name)
            if handle is not None:
                setattr(self, name, None)
                self._backend.close(handle)
        logger.debug(f"Closed HID channel {self._info.usb_id}")

    def __enter__(self) -> HidChannel:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return (
            f"HidChannel({self._info.usb_id}, in={self.input_report_length}, "
            f"out={self.output_report_length}, {state})"
        )
