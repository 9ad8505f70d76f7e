"""CLI entrypoint for alertwatch."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from pathlib import Path
import sys

from .constants import (
    ALL_REGIONS,
    DEFAULT_BASE_URL,
    DEMO_INTERVAL,
    HISTORY_INTERVAL,
    POLL_INTERVAL,
    REGION_ORDER,
    REGIONS,
    REQUEST_TIMEOUT,
    ClientSettings,
)
from .model import now_local, parse_alert_body
from .runner import run_foreground
from .store import AlertStore
from .transport import AlertsClient
from .regions import region_of
from .views import build_alert_card, format_card, format_history, history_rows


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}") from None
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"Must be positive: {value}")
    return parsed


def _settings_from_args(args: argparse.Namespace) -> ClientSettings:
    return ClientSettings(
        base_url=args.base_url,
        poll_interval=getattr(args, "poll_interval", POLL_INTERVAL),
        demo_interval=getattr(args, "demo_interval", DEMO_INTERVAL),
        history_interval=getattr(args, "history_interval", HISTORY_INTERVAL),
        request_timeout=args.timeout,
        region=getattr(args, "region", ALL_REGIONS),
        sound=not getattr(args, "no_sound", False),
        notifications=not getattr(args, "no_notify", False),
        map_output=Path(args.map_output).expanduser() if getattr(args, "map_output", None) else None,
    )


def cmd_watch(args: argparse.Namespace) -> int:
    run_foreground(_settings_from_args(args), demo=args.demo)
    return 0


async def _fetch_current(settings: ClientSettings) -> str:
    async with AlertsClient(settings.base_url, settings.request_timeout) as client:
        return await client.fetch_current()


async def _fetch_history(settings: ClientSettings):
    async with AlertsClient(settings.base_url, settings.request_timeout) as client:
        return await client.fetch_history()


def cmd_current(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    alert = parse_alert_body(asyncio.run(_fetch_current(settings)))
    if args.json:
        store = AlertStore()
        store.set_current(alert)
        shown = store.filtered_current(settings.region)
        print(json.dumps(shown.to_dict() if shown else None, indent=2, ensure_ascii=False))
        return 0
    for line in format_card(build_alert_card(alert, settings.region)):
        print(line)
    return 0


def cmd_history(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    store = AlertStore()
    store.set_history(asyncio.run(_fetch_history(settings)))
    items = store.filtered_history(settings.region)
    if args.limit:
        items = items[: args.limit]
    if args.json:
        print(json.dumps([item.to_dict() for item in items], indent=2, ensure_ascii=False))
        return 0
    rows = history_rows(items, now_local())
    for line in format_history(rows):
        print(line)
    return 0


def cmd_regions(args: argparse.Namespace) -> int:
    if args.locate:
        region_id = region_of(args.locate)
        if region_id is None:
            print(f"{args.locate}: no region")
            return 1
        print(f"{args.locate}\t{region_id}\t{REGIONS[region_id].label}")
        return 0

    for region_id in REGION_ORDER:
        region = REGIONS[region_id]
        count = "*" if region_id == ALL_REGIONS else str(len(region.cities))
        print(f"{region_id}\t{count}\t{region.label}")
    return 0


def _add_region_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--region", default=ALL_REGIONS, choices=REGION_ORDER, help="Filter by region")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="alertwatch")
    parser.add_argument(
        "--base-url",
        default=os.environ.get("ALERTWATCH_BASE_URL", DEFAULT_BASE_URL),
        help="Alert server base URL (default: $ALERTWATCH_BASE_URL or http://localhost:8080)",
    )
    parser.add_argument("--timeout", type=_positive_float, default=REQUEST_TIMEOUT, help="HTTP timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    watch = sub.add_parser("watch", help="Poll live alerts and render them until interrupted")
    _add_region_arg(watch)
    watch.add_argument("--demo", action="store_true", help="Start in demo mode")
    watch.add_argument("--map-output", default=None, help="Write the Leaflet map HTML to this path")
    watch.add_argument("--no-sound", action="store_true")
    watch.add_argument("--no-notify", action="store_true")
    watch.add_argument("--poll-interval", type=_positive_float, default=POLL_INTERVAL)
    watch.add_argument("--history-interval", type=_positive_float, default=HISTORY_INTERVAL)
    watch.add_argument("--demo-interval", type=_positive_float, default=DEMO_INTERVAL)
    watch.set_defaults(func=cmd_watch)

    current = sub.add_parser("current", help="Fetch and show the active alert once")
    _add_region_arg(current)
    current.add_argument("--json", action="store_true", help="Print the alert as JSON")
    current.set_defaults(func=cmd_current)

    history = sub.add_parser("history", help="Fetch and show recent alerts once")
    _add_region_arg(history)
    history.add_argument("--limit", type=int, default=20)
    history.add_argument("--json", action="store_true", help="Print items as JSON")
    history.set_defaults(func=cmd_history)

    regions = sub.add_parser("regions", help="List region filters")
    regions.add_argument("--locate", metavar="CITY", help="Show which region a location belongs to")
    regions.set_defaults(func=cmd_regions)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except Exception as exc:  # noqa: BLE001
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
