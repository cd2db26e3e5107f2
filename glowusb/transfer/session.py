"""Session orchestration: break packet, data packets, optional trailing break."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..device.channel import HidChannel
from ..errors import TransferFailed
from ..models import Packet, SessionResult
from ..protocol.status import DEFAULT_LAYOUT, StatusLayout
from .engine import DEFAULT_POLICY, TransferPolicy, build_output_report, send_break, send_data

logger = logging.getLogger(__name__)

STAGE_BREAK = "break"
STAGE_DATA = "data"
STAGE_TRAILING_BREAK = "trailing_break"


def _failed(
    error: TransferFailed,
    stage: str,
    attempted: int,
    succeeded: int,
    total: int,
    index: Optional[int] = None,
) -> SessionResult:
    error.stage = stage
    error.packet_index = index
    logger.error(f"USB transfer failed ({stage}): {error}")
    result = SessionResult(
        attempted=attempted,
        succeeded=succeeded,
        total=total,
        success=False,
        failed_stage=stage,
        failed_index=index,
        error=error,
    )
    logger.info(result.summary())
    return result


def run_session(
    channel: HidChannel,
    break_packet: Packet,
    data_packets: Sequence[Packet],
    trailing_break: bool = False,
    policy: TransferPolicy = DEFAULT_POLICY,
    layout: StatusLayout = DEFAULT_LAYOUT,
) -> SessionResult:
    """Transfer a packet sequence to an open channel.

    Sends the break packet, then every data packet in order, then (if
    requested and everything succeeded) a trailing break packet. The first
    failure ends the session; later packets are not attempted.

    Args:
        channel: Open HID channel
        break_packet: Break packet sent before (and optionally after) the data
        data_packets: Data packets in transfer order
        trailing_break: Send a second break packet after the data
        policy: Poll limits
        layout: Status byte offsets

    Returns:
        SessionResult with packet counts and the terminal error, if any

    Raises:
        LengthMismatch: If any packet does not fit the channel's output
            report; raised before any device I/O
    """
    # Fail fast on a report length defect before touching the device.
    build_output_report(channel, break_packet)
    for packet in data_packets:
        build_output_report(channel, packet)

    total = len(data_packets)

    logger.debug("Break packet: sending")
    try:
        send_break(channel, break_packet, policy, layout)
    except TransferFailed as e:
        return _failed(e, STAGE_BREAK, attempted=0, succeeded=0, total=total)

    succeeded = 0
    for index, packet in enumerate(data_packets):
        logger.debug(f"Data packet {index + 1}: sending")
        try:
            result = send_data(channel, packet, policy, layout)
        except TransferFailed as e:
            return _failed(
                e, STAGE_DATA, attempted=index + 1, succeeded=succeeded, total=total, index=index
            )
        if result.retries:
            logger.debug(f"Data packet {index + 1}: {result.retries} busy retries")
        succeeded += 1

    if trailing_break:
        logger.debug("Break packet: sending trailing break")
        try:
            send_break(channel, break_packet, policy, layout)
        except TransferFailed as e:
            return _failed(
                e, STAGE_TRAILING_BREAK, attempted=total, succeeded=succeeded, total=total
            )

    result = SessionResult(attempted=total, succeeded=succeeded, total=total, success=True)
    logger.info(f"USB transfer succeeded: {result.summary()}")
    return result
