"""Device status decoding.

The firmware answers every output report with an input report whose
leading bytes carry busy/ready flags:

    byte 0  report ID
    byte 1  animation active (non-zero = busy)
    byte 2  memory write active (non-zero = busy)
    byte 3  mode (0 = control mode)
"""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import HidIOError

ANIMATION_OFFSET = 1
MEMORY_WRITE_OFFSET = 2
MODE_OFFSET = 3
CONTROL_MODE_VALUE = 0


@dataclass(frozen=True)
class StatusLayout:
    """Byte offsets of the status flags within an input report."""
    animation_offset: int = ANIMATION_OFFSET
    memory_write_offset: int = MEMORY_WRITE_OFFSET
    mode_offset: int = MODE_OFFSET
    control_mode_value: int = CONTROL_MODE_VALUE

    @property
    def min_report_length(self) -> int:
        return max(self.animation_offset, self.memory_write_offset, self.mode_offset) + 1


DEFAULT_LAYOUT = StatusLayout()


@dataclass(frozen=True)
class DeviceStatus:
    """Status flags decoded from one input report.

    Attributes:
        animation_active: A lightshow animation is running
        memory_write_active: The device is writing to flash
        control_mode: The device is in control mode and accepts commands
        raw: The input report the flags were decoded from
    """
    animation_active: bool
    memory_write_active: bool
    control_mode: bool
    raw: bytes = b""

    @property
    def is_busy(self) -> bool:
        return self.animation_active or self.memory_write_active

    @property
    def is_idle(self) -> bool:
        """Ready to accept a new command sequence."""
        return not self.is_busy and self.control_mode

    @classmethod
    def from_report(cls, report: bytes, layout: StatusLayout = DEFAULT_LAYOUT) -> DeviceStatus:
        """Decode status flags from an input report.

        Raises:
            HidIOError: If the report is too short for the layout
        """
        report = bytes(report)
        if len(report) < layout.min_report_length:
            raise HidIOError(
                f"Input report too short for status decoding "
                f"({len(report)} < {layout.min_report_length} bytes)"
            )

        return cls(
            animation_active=report[layout.animation_offset] != 0,
            memory_write_active=report[layout.memory_write_offset] != 0,
            control_mode=report[layout.mode_offset] == layout.control_mode_value,
            raw=report,
        )
