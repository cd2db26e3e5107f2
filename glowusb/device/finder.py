from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List, Optional

from ..errors import DeviceNotFoundError, HidIOError
from ..models import HidDeviceInfo
from .backend import MODE_READ, MODE_WRITE, HidBackend
from .channel import HidChannel
from .hidapi_backend import HidapiBackend

logger = logging.getLogger(__name__)


def iter_devices(backend: HidBackend) -> Iterator[HidDeviceInfo]:
    """Lazily yield every HID interface the backend enumerates."""
    yield from backend.enumerate()


def is_matching_device(info: HidDeviceInfo, vendor_id: int, product_id: int) -> bool:
    """Exact match on both vendor and product ID."""
    return info.vendor_id == vendor_id and info.product_id == product_id


def find_devices(
    backend: HidBackend,
    *,
    matcher: Optional[Callable[[HidDeviceInfo], bool]] = None,
    vendor_id: Optional[int] = None,
    product_id: Optional[int] = None,
) -> List[HidDeviceInfo]:
    """
    Find all enumerated HID interfaces that match.

    Pass either a custom `matcher(info) -> bool` or vendor/product IDs.
    With neither, every device is returned.
    """
    results: List[HidDeviceInfo] = []

    for info in iter_devices(backend):
        if matcher is not None:
            if matcher(info):
                results.append(info)
        elif vendor_id is None or product_id is None:
            results.append(info)
        elif is_matching_device(info, vendor_id, product_id):
            results.append(info)

    return results


def _close_quietly(backend: HidBackend, handle: Any) -> None:
    if handle is not None:
        backend.close(handle)


def _acquire(backend: HidBackend, info: HidDeviceInfo) -> HidChannel:
    """Open read and write handles on one candidate and query its reports.

    Handles opened so far are closed again if any step fails.
    """
    read_handle = write_handle = None
    try:
        read_handle = backend.open(info.path, MODE_READ)
        write_handle = backend.open(info.path, MODE_WRITE)
        capabilities = backend.query_capabilities(read_handle)
    except HidIOError:
        _close_quietly(backend, write_handle)
        _close_quietly(backend, read_handle)
        raise

    return HidChannel(backend, info, read_handle, write_handle, capabilities)


def open_device(
    vendor_id: int,
    product_id: int,
    backend: Optional[HidBackend] = None,
) -> HidChannel:
    """
    Open the first usable HID device with the given vendor/product IDs.

    Behaviour:
        - Single enumeration pass, no retry
        - A matching device whose handles or capabilities cannot be
          acquired is skipped with a warning
        - No usable match -> DeviceNotFoundError

    The returned channel is a context manager; close it when done.
    """
    if backend is None:
        backend = HidapiBackend()

    for info in iter_devices(backend):
        if not is_matching_device(info, vendor_id, product_id):
            continue

        try:
            channel = _acquire(backend, info)
        except HidIOError as e:
            logger.warning(f"Skipping {info.usb_id} at {info.path!r}: {e}")
            continue

        logger.info(
            f"USB device found (VendorID 0x{vendor_id:04X}, ProductID 0x{product_id:04X}, "
            f"input {channel.input_report_length} / output {channel.output_report_length} bytes)"
        )
        return channel

    raise DeviceNotFoundError(vendor_id, product_id)
