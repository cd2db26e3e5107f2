"""HID backend using cython-hidapi (the `hid` module).

hidapi uses the OS HID driver, so no kernel driver or libusb detach is
needed. Output reports go through hid_write(), input reports are fetched
with a GET_REPORT control transfer via hid_get_input_report(), matching the
HidD_SetOutputReport/HidD_GetInputReport pair the firmware was built for.

Requires: ``pip install hidapi``
"""
from __future__ import annotations

import logging
from typing import Any, Iterator

import hid

from ..errors import HidIOError
from ..models import HidDeviceInfo, ReportCapabilities
from .backend import MODE_READ, MODE_WRITE, HidBackend
from .descriptor import DescriptorError, parse_report_lengths

logger = logging.getLogger(__name__)

REPORT_ID = 0
MAX_DESCRIPTOR_SIZE = 4096


def _to_info(entry: dict) -> HidDeviceInfo:
    """Convert a hid.enumerate() dict to HidDeviceInfo."""
    return HidDeviceInfo(
        vendor_id=entry.get("vendor_id", 0),
        product_id=entry.get("product_id", 0),
        path=entry.get("path", b""),
        manufacturer=entry.get("manufacturer_string") or None,
        product=entry.get("product_string") or None,
        serial_number=entry.get("serial_number") or None,
        interface_number=entry.get("interface_number", -1),
    )


class HidapiBackend(HidBackend):
    """HidBackend implementation over cython-hidapi."""

    def enumerate(self) -> Iterator[HidDeviceInfo]:
        for entry in hid.enumerate():
            yield _to_info(entry)

    def open(self, path: bytes, mode: str) -> Any:
        if mode not in (MODE_READ, MODE_WRITE):
            raise ValueError(f"Unknown open mode {mode!r}")

        device = hid.device()
        try:
            device.open_path(path)
        except (OSError, ValueError) as e:
            raise HidIOError(f"Failed to open {path!r} for {mode}: {e}") from e

        logger.debug(f"Opened {path!r} for {mode}")
        return device

    def close(self, handle: Any) -> None:
        try:
            handle.close()
        except (OSError, ValueError) as e:
            logger.warning(f"Error closing HID handle: {e}")

    def query_capabilities(self, handle: Any) -> ReportCapabilities:
        try:
            descriptor = handle.get_report_descriptor(MAX_DESCRIPTOR_SIZE)
        except (OSError, ValueError, AttributeError) as e:
            raise HidIOError(f"Unable to get device capabilities: {e}") from e

        try:
            caps = parse_report_lengths(bytes(descriptor))
        except DescriptorError as e:
            raise HidIOError(f"Unable to parse report descriptor: {e}") from e

        if caps.input_report_length == 0:
            raise HidIOError("Input report unsupported")
        if caps.output_report_length == 0:
            raise HidIOError("Output report unsupported")
        return caps

    def write_report(self, handle: Any, data: bytes) -> None:
        try:
            written = handle.write(bytes(data))
        except (OSError, ValueError) as e:
            raise HidIOError(f"Failed to write output report: {e}") from e

        if written < len(data):
            raise HidIOError(
                f"Failed to write output report ({written} of {len(data)} bytes): "
                f"{handle.error()}"
            )

    def read_report(self, handle: Any, length: int) -> bytes:
        try:
            data = handle.get_input_report(REPORT_ID, length)
        except (OSError, ValueError) as e:
            raise HidIOError(f"Failed to read input report: {e}") from e

        if not data:
            raise HidIOError("Failed to read input report: no data")
        return bytes(data)
