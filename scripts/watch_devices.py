#!/usr/bin/env python3
"""Live smart-home watcher.

Logs in, loads the device snapshot, prints one card per device and then
prints every realtime change until interrupted (or until ``--seconds``
elapse).

Credentials come from ``SMARTHOME_USERNAME`` / ``SMARTHOME_PASSWORD``
(see :meth:`SmartHomeConfig.from_env` for the other variables).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysmarthome import DeviceRegistry, DeviceUpdated, SmartHomeClient, SmartHomeConfig, SmartHomeError  # noqa: E402
from pysmarthome.subscribers import CardBoard, RoomAggregator  # noqa: E402


def _print_update(event: DeviceUpdated) -> None:
    device = event.device
    flags = [name for name in ("status", "value", "color") if getattr(event.changed, name)]
    detail = ""
    if event.decoded is not None:
        detail = f" {event.decoded.kind}={event.decoded.value!r}"
    print(f"~ {device.name or device.id} [{', '.join(flags)}] status={device.status} value={device.value}{detail}")


async def _run(args: argparse.Namespace) -> int:
    try:
        config = SmartHomeConfig.from_env()
    except SmartHomeError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    registry = DeviceRegistry()
    board = CardBoard(registry)
    rooms = RoomAggregator(registry)

    try:
        async with SmartHomeClient(config, registry) as client:
            await client.login()
            await client.refresh()

            for card in board.cards:
                print(f"- {card.name:<24} {card.type_label:<10} {card.room:<14} {card.status_text:<3} {card.value_text}")
            for state in rooms.rooms.values():
                print(f"# {state.room}: {state.active_count}/{len(state.device_ids)} on, lit={state.lit} {state.color}")

            with registry.bus.subscribe(DeviceUpdated, _print_update):
                if args.seconds > 0:
                    await asyncio.sleep(args.seconds)
                else:
                    await asyncio.Event().wait()
    except SmartHomeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        board.close()
        rooms.close()
    return 0


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch live smart-home device changes")
    parser.add_argument(
        "--seconds",
        type=float,
        default=0,
        help="Stop after this many seconds (default: run until interrupted).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging (request bodies are redacted).",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
