#!/usr/bin/env python3
"""Live Sensi realtime watcher.

Connects with credentials from ``SENSI_USERNAME`` / ``SENSI_PASSWORD`` (or
the flags below), lists the account's thermostats, subscribes to one and
prints every emitted event until interrupted or until polling stops.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import BaseModel  # noqa: E402

from pysensi import SensiClient, SensiConfig, SensiError, SensiEvent  # noqa: E402


def _format_payload(payload: Any) -> str:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, default=str, sort_keys=True)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch a Sensi thermostat's realtime events")
    parser.add_argument("--username", default=None, help="Account email (default: $SENSI_USERNAME).")
    parser.add_argument("--password", default=None, help="Account password (default: $SENSI_PASSWORD).")
    parser.add_argument(
        "--icd",
        default=None,
        help="Thermostat ICD. If omitted, the first thermostat from the listing is used.",
    )
    parser.add_argument("--list", action="store_true", help="Only list thermostats and exit.")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging with request tracing.")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {"api_trace_enabled": args.verbose}
    if args.username:
        overrides["username"] = args.username
    if args.password:
        overrides["password"] = args.password
    config = SensiConfig.from_env(**overrides)

    def _print_event(name: str, payload: Any) -> None:
        print(f"{name}: {_format_payload(payload)}", flush=True)

    async with SensiClient(config, on_event=_print_event) as client:
        thermostats = await client.connect()
        if not thermostats:
            print("No thermostats returned by account")
            return 2
        for thermostat in thermostats:
            print(f"{thermostat.icd}\t{thermostat.device_name or ''}")
        if args.list:
            return 0

        icd = args.icd or thermostats[0].icd
        stopped: list[Any] = []
        client.on(SensiEvent.POLLING_STOPPED, stopped.append)
        task = await client.start(icd)
        await task
        return 1 if stopped else 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130
    except SensiError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
