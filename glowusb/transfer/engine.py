"""Packet transfer state machine.

Every packet is written once as an output report and then confirmed by
polling input reports until the device stops reporting busy:

    Idle -> Sent -> Busy (sleep, re-poll) -> Ready
                         \\-> Failed (I/O error or poll limit)

No state persists between packets. Each poll returns a fresh DeviceStatus.
All calls block the calling thread; there is no concurrency.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..device.channel import HidChannel
from ..errors import BusyTimeout, TransferFailed
from ..models import Packet, PacketOutcome, PacketResult
from ..protocol.status import DEFAULT_LAYOUT, DeviceStatus, StatusLayout

logger = logging.getLogger(__name__)

REPORT_ID = 0
DEFAULT_MAX_POLLS = 10
DEFAULT_POLL_INTERVAL = 0.1  # seconds


@dataclass(frozen=True)
class TransferPolicy:
    """Retry limits for the poll-until-ready loop.

    Attributes:
        max_polls: Maximum number of status reads per packet
        poll_interval: Seconds to wait after each busy read
    """
    max_polls: int = DEFAULT_MAX_POLLS
    poll_interval: float = DEFAULT_POLL_INTERVAL

    def __post_init__(self):
        if self.max_polls < 1:
            raise ValueError(f"max_polls must be at least 1, got {self.max_polls}")
        if self.poll_interval < 0:
            raise ValueError(f"poll_interval must not be negative, got {self.poll_interval}")


DEFAULT_POLICY = TransferPolicy()


def build_output_report(channel: HidChannel, payload: bytes) -> bytes:
    """Prefix payload with report ID 0 and check it fills an output report."""
    report = bytes([REPORT_ID]) + bytes(payload)
    channel.check_output_length(report)
    return report


def poll_status(channel: HidChannel, layout: StatusLayout = DEFAULT_LAYOUT) -> DeviceStatus:
    """Read one input report and decode it."""
    return DeviceStatus.from_report(channel.read_input_report(), layout)


def exchange(channel: HidChannel, payload: bytes, layout: StatusLayout = DEFAULT_LAYOUT) -> DeviceStatus:
    """Write one output report, then read and decode one input report.

    Raises:
        LengthMismatch: If payload does not fill an output report (not sent)
        HidIOError: If the write or read fails
    """
    report = build_output_report(channel, payload)
    channel.write_output_report(report)
    return poll_status(channel, layout)


def _poll_until_ready(
    channel: HidChannel,
    packet: Packet,
    is_ready: Callable[[DeviceStatus], bool],
    is_busy: Callable[[DeviceStatus], bool],
    label: str,
    policy: TransferPolicy,
    layout: StatusLayout,
) -> PacketResult:
    status = exchange(channel, packet, layout)
    polls = 1

    while True:
        if is_ready(status):
            logger.debug(f"{label} sent successfully after {polls} poll(s)")
            outcome = PacketOutcome.SENT if polls == 1 else PacketOutcome.BUSY_RETRIED
            return PacketResult(outcome=outcome, polls=polls, status=status)

        if not is_busy(status):
            raise TransferFailed(
                f"{label}: unexpected device status {status.raw[:4].hex(' ')}"
            )

        reason = "write" if status.memory_write_active else "animation"
        logger.debug(
            f"{label}: {reason} in progress... recheck in {policy.poll_interval * 1000:.0f}ms"
        )
        time.sleep(policy.poll_interval)

        if polls >= policy.max_polls:
            raise BusyTimeout(
                f"{label}: device still busy after {polls} polls",
                polls=polls,
            )

        status = poll_status(channel, layout)
        polls += 1


def send_break(
    channel: HidChannel,
    packet: Packet,
    policy: TransferPolicy = DEFAULT_POLICY,
    layout: StatusLayout = DEFAULT_LAYOUT,
) -> PacketResult:
    """Send a break packet and wait until the device is idle in control mode.

    Raises:
        BusyTimeout: If animation or memory write is still active after the poll limit
        TransferFailed: If the device is not busy but not in control mode
        HidIOError: On any write/read failure
    """
    return _poll_until_ready(
        channel,
        packet,
        is_ready=lambda s: s.is_idle,
        is_busy=lambda s: s.is_busy,
        label="Break packet",
        policy=policy,
        layout=layout,
    )


def send_data(
    channel: HidChannel,
    packet: Packet,
    policy: TransferPolicy = DEFAULT_POLICY,
    layout: StatusLayout = DEFAULT_LAYOUT,
) -> PacketResult:
    """Send a data packet and wait until the device finishes its memory write.

    Raises:
        BusyTimeout: If memory write is still active after the poll limit
        HidIOError: On any write/read failure
    """
    return _poll_until_ready(
        channel,
        packet,
        is_ready=lambda s: not s.memory_write_active,
        is_busy=lambda s: s.memory_write_active,
        label="Data packet",
        policy=policy,
        layout=layout,
    )
