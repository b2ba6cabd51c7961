"""CLI entrypoint for inspecting and refreshing the content cache."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import timedelta
from typing import Any

from vidyapith_content.content_kinds import ALL_KINDS, kind_for_name
from vidyapith_content.errors import CLIError, ContentError
from vidyapith_content.service import ContentService
from vidyapith_content.settings import Settings
from vidyapith_content.time_utils import iso_z


def _settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    return Settings(**overrides)


def _format_ttl(ttl: timedelta) -> str:
    seconds = int(ttl.total_seconds())
    if seconds and seconds % 86400 == 0:
        return f"{seconds // 86400}d"
    if seconds and seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds and seconds % 60 == 0:
        return f"{seconds // 60}m"
    return str(ttl)


def _cmd_kinds(args: argparse.Namespace) -> int:
    for kind in ALL_KINDS:
        ttl = _format_ttl(kind.ttl)
        print(f"{kind.name:<11} {kind.cache_key:<30} ttl={ttl:<4} {kind.description}")
    return 0


async def _get(args: argparse.Namespace) -> int:
    kind = kind_for_name(args.kind)
    async with ContentService(_settings(args)) as service:
        result = await service.cache(kind).load(force_refresh=bool(args.refresh))
    if args.json_output:
        payload = {
            "kind": kind.name,
            "source": result.source,
            "fetched_at": iso_z(result.fetched_at),
            "content": result.value.to_json(),
        }
        print(json.dumps(payload, sort_keys=True, indent=2, ensure_ascii=False))
        return 0
    print(f"{kind.name}: {result.source} (fetched {iso_z(result.fetched_at)})")
    if result.error is not None:
        print(f"warning: refresh failed: {result.error}", file=sys.stderr)
    print(json.dumps(result.value.to_json(), indent=2, ensure_ascii=False))
    return 0


def _cmd_get(args: argparse.Namespace) -> int:
    return asyncio.run(_get(args))


async def _status(args: argparse.Namespace) -> int:
    async with ContentService(_settings(args)) as service:
        rows = service.status()
        gate = service.contact_gate.state()
        gate_due = service.contact_gate.is_due()
    last = iso_z(gate.last_triggered_at) if gate.last_triggered_at else None
    if args.json_output:
        payload = {
            "kinds": [row.to_json() for row in rows],
            "contact_gate": {"last_triggered_at": last, "due": gate_due},
        }
        print(json.dumps(payload, sort_keys=True, indent=2))
        return 0
    for row in rows:
        state = "fresh" if row.fresh else ("stale" if row.cached else "empty")
        fetched = iso_z(row.fetched_at) if row.fetched_at else "-"
        print(f"{row.name:<11} {state:<6} {fetched}")
    print(f"contact gate: last={last or '-'} due={'yes' if gate_due else 'no'}")
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    return asyncio.run(_status(args))


async def _refresh_daily(args: argparse.Namespace) -> int:
    async with ContentService(_settings(args)) as service:
        due = service.contact_gate.is_due()
        refreshed = await service.refresh_contact_if_needed()
    if refreshed:
        print("contact content refreshed")
        return 0
    if not due:
        print("contact refresh not due")
        return 0
    raise CLIError("contact refresh was due but the fetch failed; gate left unchanged")


def _cmd_refresh_daily(args: argparse.Namespace) -> int:
    return asyncio.run(_refresh_daily(args))


def _cmd_reset_gate(args: argparse.Namespace) -> int:
    service = ContentService(_settings(args))
    try:
        service.contact_gate.reset()
    finally:
        asyncio.run(service.aclose())
    print(f"cleared {service.contact_gate.key}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vidyapith-content")
    parser.add_argument("--data-dir", default="")
    parser.add_argument("--verbose", "-v", action="store_true")
    subparsers = parser.add_subparsers(dest="command")

    kinds = subparsers.add_parser("kinds", help="List content kinds with cache key and TTL")
    kinds.set_defaults(func=_cmd_kinds)

    get = subparsers.add_parser("get", help="Read one content kind through its cache")
    get.set_defaults(func=_cmd_get)
    get.add_argument("kind")
    get.add_argument("--refresh", action="store_true")
    get.add_argument("--json", dest="json_output", action="store_true")

    status = subparsers.add_parser("status", help="Show cached/fresh state per kind")
    status.set_defaults(func=_cmd_status)
    status.add_argument("--json", dest="json_output", action="store_true")

    refresh = subparsers.add_parser("refresh-daily", help="Run the daily contact refresh")
    refresh.set_defaults(func=_cmd_refresh_daily)

    reset = subparsers.add_parser("reset-gate", help="Make the daily contact refresh due")
    reset.set_defaults(func=_cmd_reset_gate)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    try:
        return int(func(args))
    except (CLIError, ContentError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
