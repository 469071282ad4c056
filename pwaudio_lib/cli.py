"""Console entry point: list audio devices and clock settings."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from .client import PipeWireClient
from .config import load_session_config
from .errors import PwAudioError
from .roundtrip import roundtrip
from .states import Device, ObjectStore, Settings

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pwaudio-devices",
        description="List PipeWire audio sinks/sources and the clock settings.",
    )
    parser.add_argument("--remote", help="Remote name or absolute socket path (default: $PIPEWIRE_REMOTE or pipewire-0)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--wire-log", action="store_true", help="Hex dump every frame (implies --debug)")
    return parser


def format_device(device: Device) -> str:
    return (
        f"{device.id:>4}  {device.direction.value:<6}  {device.node_name}\n"
        f"      nick={device.nick_name!r} description={device.description!r} "
        f"channels={device.channels} buffer_limit={device.buffer_limit}"
    )


def format_settings(settings: Settings) -> str:
    rates = " ".join(str(rate) for rate in settings.allow_rates)
    return (
        f"rate={settings.rate} allow_rates=[{rates}] quantum={settings.quantum} "
        f"min_quantum={settings.min_quantum} max_quantum={settings.max_quantum} "
        f"force_rate={settings.force_rate} force_quantum={settings.force_quantum}"
    )


def print_store(store: ObjectStore, out: Optional[TextIO] = None) -> None:
    out = sys.stdout if out is None else out
    print(f"devices ({len(store.devices)}):", file=out)
    for device in store.devices:
        print(format_device(device), file=out)
    print("settings:", file=out)
    print(f"      {format_settings(store.settings)}", file=out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    debug = args.debug or args.wire_log
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format=LOG_FORMAT)

    try:
        config = load_session_config(remote=args.remote, wire_log=True if args.wire_log else None)
        client = PipeWireClient(config)
        try:
            store = roundtrip(client)
        finally:
            client.close()
    except PwAudioError as e:
        logger.error("%s", e)
        return 1

    print_store(store)
    return 0
