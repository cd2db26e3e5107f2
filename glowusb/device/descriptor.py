"""HID report descriptor parsing.

hidapi does not expose the Windows HIDP_CAPS structure, so report lengths
are derived from the raw report descriptor instead. Lengths follow the
HIDP_CAPS convention: the longest report of each kind plus one byte for
the report ID, which is present (as 0) even when the device declares no
report IDs.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict

from ..models import ReportCapabilities

# Item types (bits 2-3 of the prefix byte)
TYPE_MAIN = 0
TYPE_GLOBAL = 1
TYPE_LOCAL = 2

# Main item tags
TAG_INPUT = 0x8
TAG_OUTPUT = 0x9
TAG_FEATURE = 0xB

# Global item tags
TAG_REPORT_SIZE = 0x7
TAG_REPORT_ID = 0x8
TAG_REPORT_COUNT = 0x9
TAG_PUSH = 0xA
TAG_POP = 0xB

LONG_ITEM_PREFIX = 0xFE

_KINDS = {TAG_INPUT: "input", TAG_OUTPUT: "output", TAG_FEATURE: "feature"}


class DescriptorError(ValueError):
    """Raised when a report descriptor is truncated or inconsistent."""
    pass


def _item_value(data: bytes) -> int:
    return int.from_bytes(data, "little") if data else 0


def parse_report_lengths(descriptor: bytes) -> ReportCapabilities:
    """Compute input/output/feature report byte lengths.

    Args:
        descriptor: Raw HID report descriptor

    Returns:
        ReportCapabilities with lengths including the report-ID byte
        (0 for a report kind the device does not declare)

    Raises:
        DescriptorError: If the descriptor is truncated
    """
    descriptor = bytes(descriptor)

    # bits[kind][report_id] -> accumulated report bits
    bits: Dict[str, Dict[int, int]] = defaultdict(lambda: defaultdict(int))
    state = {"size": 0, "count": 0, "report_id": 0}
    stack = []

    pos = 0
    while pos < len(descriptor):
        prefix = descriptor[pos]

        if prefix == LONG_ITEM_PREFIX:
            if pos + 1 >= len(descriptor):
                raise DescriptorError(f"Truncated long item at offset {pos}")
            pos += 3 + descriptor[pos + 1]
            continue

        size = prefix & 0x3
        if size == 3:
            size = 4
        item_type = (prefix >> 2) & 0x3
        tag = prefix >> 4

        data = descriptor[pos + 1:pos + 1 + size]
        if len(data) != size:
            raise DescriptorError(f"Truncated item 0x{prefix:02X} at offset {pos}")
        pos += 1 + size
        value = _item_value(data)

        if item_type == TYPE_GLOBAL:
            if tag == TAG_REPORT_SIZE:
                state["size"] = value
            elif tag == TAG_REPORT_COUNT:
                state["count"] = value
            elif tag == TAG_REPORT_ID:
                state["report_id"] = value
            elif tag == TAG_PUSH:
                stack.append(dict(state))
            elif tag == TAG_POP:
                if not stack:
                    raise DescriptorError(f"Pop without Push at offset {pos}")
                state = stack.pop()
        elif item_type == TYPE_MAIN and tag in _KINDS:
            bits[_KINDS[tag]][state["report_id"]] += state["size"] * state["count"]

    def _length(kind: str) -> int:
        reports = bits.get(kind)
        if not reports:
            return 0
        longest = max(reports.values())
        return (longest + 7) // 8 + 1

    return ReportCapabilities(
        input_report_length=_length("input"),
        output_report_length=_length("output"),
        feature_report_length=_length("feature"),
    )
