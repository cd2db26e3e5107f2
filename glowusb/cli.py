#!/usr/bin/env python3
"""
GlowUSB - Command Line Interface

Downloads, starts, stops and resumes lightshows on a USB HID controller.
"""
from __future__ import annotations

import argparse
import logging
import sys
from enum import IntEnum
from typing import List, Optional

from . import __version__
from .config import LightshowConfig, load_config
from .device import HidBackend, HidapiBackend, find_devices, open_device
from .errors import (
    ConfigError,
    DeviceNotFoundError,
    HidIOError,
    InvalidPacketSize,
    LengthMismatch,
    MalformedPayload,
)
from .models import Command
from .transfer import run_session

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    SUCCESS = 0
    DEVICE_NOT_FOUND = 1
    TRANSFER_FAILED = 2
    INVALID_ARGS = 3
    INVALID_CONFIG = 4


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with INVALID_ARGS instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(ExitCode.INVALID_ARGS, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="glowusb",
        description="Transfer lightshow packets to a USB HID controller",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    glowusb --input-file show.xml --download
    glowusb --input-file show.xml --stop
    glowusb --vendor-id 0x1234 --product-id 0x5678 --packet-size 4 \\
            --packets "01,02,03,04" --start
    glowusb --list
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for debug output)"
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List enumerated HID devices and exit"
    )

    source = parser.add_argument_group("packet source")
    source.add_argument("--input-file", "-i", metavar="PATH", help="Lightshow XML file")
    source.add_argument("--vendor-id", metavar="ID", help="USB vendor ID (decimal or 0x hex)")
    source.add_argument("--product-id", metavar="ID", help="USB product ID (decimal or 0x hex)")
    source.add_argument("--packet-size", metavar="N", help="Packet size in bytes (1-255)")
    source.add_argument("--packets", metavar="BLOB", help="Hex bytes separated by commas or spaces")

    commands = parser.add_mutually_exclusive_group()
    for command in Command:
        commands.add_argument(
            f"--{command.value}",
            dest="command",
            action="store_const",
            const=command,
            help=f"{command.value.capitalize()} the lightshow"
        )

    return parser


def setup_logging(verbosity: int) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbosity > 0 else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _resolve_config(parser: argparse.ArgumentParser, args: argparse.Namespace) -> LightshowConfig:
    if args.input_file:
        return load_config(args.input_file, args.command)

    missing = [
        flag for flag, value in (
            ("--vendor-id", args.vendor_id),
            ("--product-id", args.product_id),
            ("--packet-size", args.packet_size),
            ("--packets", args.packets),
        )
        if value is None
    ]
    if missing:
        parser.error(f"--input-file or {', '.join(missing)} required")

    return LightshowConfig.from_values(
        vendor_id=args.vendor_id,
        product_id=args.product_id,
        packet_size=args.packet_size,
        command=args.command,
        payload=args.packets,
    )


def list_devices(backend: HidBackend) -> int:
    devices = find_devices(backend)
    if not devices:
        print("No HID devices found")
        return ExitCode.SUCCESS

    for idx, info in enumerate(devices, 1):
        print(f"[{idx}] {info.usb_id}  {info.manufacturer or '?'} {info.product or '?'}")
        print(f"      path={info.path!r} interface={info.interface_number}")
    return ExitCode.SUCCESS


def run(config: LightshowConfig, backend: Optional[HidBackend] = None) -> int:
    """Open the device, transfer the configured packets and map the outcome."""
    try:
        channel = open_device(config.vendor_id, config.product_id, backend=backend)
    except DeviceNotFoundError as e:
        print(f"{e}")
        print("USB transfer failed.")
        return ExitCode.DEVICE_NOT_FOUND

    print(f"USB device found (VendorID {config.vendor_id}, ProductID {config.product_id}).")

    with channel:
        try:
            result = run_session(
                channel,
                config.break_packet,
                config.packets,
                trailing_break=config.trailing_break,
            )
        except LengthMismatch as e:
            print(f"Invalid packet size for this device: {e}")
            return ExitCode.INVALID_CONFIG

    if not result.success:
        if result.failed_index is not None:
            print(f"USB transfer failed at data-packet {result.failed_index + 1}.")
        else:
            print(f"USB transfer failed ({result.failed_stage} packet).")
        print(result.summary())
        return ExitCode.TRANSFER_FAILED

    print(f"USB transfer succeeded: {result.summary()}")
    return ExitCode.SUCCESS


def main(argv: Optional[List[str]] = None, backend: Optional[HidBackend] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.list:
        try:
            return list_devices(backend or HidapiBackend())
        except HidIOError as e:
            print(f"Error enumerating devices: {e}")
            return ExitCode.DEVICE_NOT_FOUND

    if args.command is None:
        parser.error("one of --download, --start, --stop, --resume is required")

    try:
        config = _resolve_config(parser, args)
    except (ConfigError, MalformedPayload, InvalidPacketSize) as e:
        print(f"{e}")
        return ExitCode.INVALID_CONFIG

    return run(config, backend=backend)


if __name__ == "__main__":
    sys.exit(main())
