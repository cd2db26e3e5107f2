"""Transfer layer: per-packet state machine and session orchestration."""

from .engine import (
    DEFAULT_POLICY,
    TransferPolicy,
    build_output_report,
    exchange,
    poll_status,
    send_break,
    send_data,
)
from .session import run_session

__all__ = [
    "DEFAULT_POLICY",
    "TransferPolicy",
    "build_output_report",
    "exchange",
    "poll_status",
    "send_break",
    "send_data",
    "run_session",
]
