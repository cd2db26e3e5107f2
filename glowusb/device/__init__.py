"""Device layer for HID lightshow controllers.

This module provides:
- The HID backend boundary (HidBackend) and its hidapi implementation
- Report length discovery from report descriptors
- Opened read/write channels with report length checks (HidChannel)
- Device discovery by vendor/product ID (open_device, find_devices)
"""

from .backend import HidBackend, MODE_READ, MODE_WRITE
from .channel import HidChannel
from .descriptor import DescriptorError, parse_report_lengths
from .finder import find_devices, is_matching_device, iter_devices, open_device
from .hidapi_backend import HidapiBackend

__all__ = [
    # Backend
    'HidBackend',
    'HidapiBackend',
    'MODE_READ',
    'MODE_WRITE',

    # Channel
    'HidChannel',
    'DescriptorError',
    'parse_report_lengths',

    # Finder
    'find_devices',
    'is_matching_device',
    'iter_devices',
    'open_device',
]
