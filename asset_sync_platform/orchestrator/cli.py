"""
CLI for the Dell asset sync: manual runs, activity history, dashboard stats,
and ad-hoc service tag checks.

    python -m asset_sync_platform.orchestrator.cli sync [--details]
    python -m asset_sync_platform.orchestrator.cli activity [--limit N]
    python -m asset_sync_platform.orchestrator.cli stats
    python -m asset_sync_platform.orchestrator.cli check SERIAL [SERIAL ...]
"""
from __future__ import annotations

import argparse
import sys
from typing import Any, Mapping, Sequence

from config import settings
from shared.errors import AssetSyncError
from shared.models.sync import OutcomeTag, RunSummary, SyncConfiguration
from shared.tools.asset_fetcher import select_strategy
from shared.tools.freshservice_client import FreshserviceClient
from shared.tools.service_tag import is_dell_service_tag, is_express_service_code
from shared.utils.logging import setup_logging
from shared.utils.terminal_ui import Ansi, print_panel

from asset_sync_platform.orchestrator.activity import ActivityLog
from asset_sync_platform.orchestrator.state_store import SyncStateStore
from asset_sync_platform.orchestrator.stats import dashboard_stats
from asset_sync_platform.orchestrator.trigger import SyncTrigger


def print_config_banner(params: Mapping[str, Any], config: SyncConfiguration) -> None:
    rows = [
        ("Domain", params.get("domain") or "(not configured)"),
        ("Strategy", select_strategy(config)),
        ("Asset Types", ", ".join(config.asset_type_ids) or "-"),
        ("Interval", f"{config.sync_interval_hours}h"),
        ("Workers", settings.MAX_WORKERS),
        ("State DB", settings.DB_PATH),
    ]
    print_panel("Current Configuration", rows, Ansi.BLUE)


def print_conclusion(summary: RunSummary, *, details: bool = False) -> None:
    rows: list[tuple[str, Any]] = [
        ("Result", summary.message),
        ("Timestamp", summary.timestamp),
        ("Updated", summary.updated_assets),
        ("No Serial", summary.count(OutcomeTag.SKIPPED_NO_SERIAL)),
        ("Already Matching", summary.count(OutcomeTag.SKIPPED_ALREADY_MATCHING)),
        ("Not Dell Format", summary.count(OutcomeTag.SKIPPED_NOT_VENDOR_FORMAT)),
        ("Errors", summary.count(OutcomeTag.ERROR)),
    ]
    color_code = Ansi.YELLOW if summary.count(OutcomeTag.ERROR) else Ansi.GREEN
    print_panel("Sync Summary", rows, color_code)

    if details and summary.outcomes:
        outcome_rows = []
        for outcome in summary.outcomes:
            note = outcome.new_asset_tag or outcome.error or outcome.skip_reason or ""
            outcome_rows.append((f"{outcome.asset_id} {outcome.asset_name}".strip(), f"{outcome.tag.value} {note}".strip()))
        print_panel("Assets", outcome_rows, Ansi.BLUE)


def _cmd_sync(args: argparse.Namespace, store: SyncStateStore) -> int:
    params = settings.install_params()
    config = SyncConfiguration.from_install_params(params)
    print_config_banner(params, config)
    trigger = SyncTrigger(store, params_loader=lambda: params)
    try:
        summary = trigger.run(source="manual")
    except AssetSyncError as exc:
        print_panel("Sync Failed", [("Error", exc)], Ansi.RED)
        return 1
    print_conclusion(summary, details=args.details)
    return 0


def _cmd_activity(args: argparse.Namespace, store: SyncStateStore) -> int:
    activity = ActivityLog(store)
    entries = activity.recent(args.limit)
    rows: list[tuple[str, Any]] = [("Last Sync", activity.last_sync_time() or "Never")]
    if entries:
        rows.extend((entry.timestamp, entry.message) for entry in entries)
    else:
        rows.append(("Activity", "No activity logs found."))
    print_panel("Recent Activity", rows, Ansi.BLUE)
    return 0


def _cmd_stats(args: argparse.Namespace, store: SyncStateStore) -> int:
    params = settings.install_params()
    config = SyncConfiguration.from_install_params(params)
    try:
        service = FreshserviceClient.from_install_params(params)
    except AssetSyncError as exc:
        print_panel("Stats Unavailable", [("Error", exc)], Ansi.RED)
        return 1
    stats = dashboard_stats(service, config, ActivityLog(store))
    count = stats["dell_asset_count"]
    rows: list[tuple[str, Any]] = [
        ("Dell Assets", "Error" if count is None else count),
        ("Last Sync", stats["last_sync_time"] or "Never"),
    ]
    rows.extend((item["timestamp"], item["message"]) for item in stats["recent_activity"])
    print_panel("Dashboard", rows, Ansi.GREEN)
    return 0


def _cmd_check(args: argparse.Namespace, store: SyncStateStore) -> int:
    rows: list[tuple[str, Any]] = []
    for serial in args.serials:
        if is_express_service_code(serial):
            verdict = "express service code"
        elif is_dell_service_tag(serial):
            verdict = "dell service tag"
        else:
            verdict = "not dell"
        rows.append((serial, verdict))
    print_panel("Service Tag Check", rows, Ansi.BLUE)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="asset-sync", description="Dell asset tag sync for Freshservice")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="run the Dell asset sync now")
    sync.add_argument("--details", action="store_true", help="list every asset outcome")
    sync.set_defaults(handler=_cmd_sync)

    activity = subparsers.add_parser("activity", help="show recent sync activity")
    activity.add_argument("--limit", type=int, default=None)
    activity.set_defaults(handler=_cmd_activity)

    stats = subparsers.add_parser("stats", help="show dashboard stats")
    stats.set_defaults(handler=_cmd_stats)

    check = subparsers.add_parser("check", help="classify serial numbers")
    check.add_argument("serials", nargs="+")
    check.set_defaults(handler=_cmd_check)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    store = SyncStateStore(settings.DB_PATH)
    return args.handler(args, store)


if __name__ == "__main__":
    sys.exit(main())
