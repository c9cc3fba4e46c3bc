"""
Run summaries and the bounded activity history.

``summarize`` and ``record`` are pure; ``ActivityLog`` persists the history and
the last sync time through the key-value state store.
"""
from __future__ import annotations

from datetime import UTC, datetime
import logging
from typing import Any, Iterable, Sequence

from config.constants import (
    ACTIVITY_HISTORY_LIMIT,
    LAST_SYNC_TIME_KEY,
    RECENT_ACTIVITY_KEY,
)
from shared.models.sync import ActivityEntry, AssetOutcome, RunSummary

from asset_sync_platform.orchestrator.state_store import SyncStateStore

logger = logging.getLogger(__name__)


def summarize(outcomes: Iterable[AssetOutcome], *, timestamp: str | None = None) -> RunSummary:
    ordered = tuple(outcomes)
    return RunSummary(
        timestamp=timestamp or datetime.now(UTC).isoformat(),
        total_assets=len(ordered),
        outcomes=ordered,
    )


def activity_entry(summary: RunSummary) -> ActivityEntry:
    return ActivityEntry(
        timestamp=summary.timestamp,
        message=summary.message,
        details=summary.model_dump(mode="json"),
    )


def record(
    history: Sequence[ActivityEntry],
    summary: RunSummary,
    *,
    limit: int = ACTIVITY_HISTORY_LIMIT,
) -> list[ActivityEntry]:
    """Return *history* with *summary* added newest-first, capped at *limit*."""
    updated = [activity_entry(summary), *history]
    return updated[: max(0, limit)]


def _parse_activities(payload: Any) -> list[ActivityEntry]:
    activities = payload.get("activities", []) if isinstance(payload, dict) else []
    if not isinstance(activities, list):
        return []
    entries: list[ActivityEntry] = []
    for item in activities:
        if not isinstance(item, dict):
            continue
        try:
            entries.append(ActivityEntry.model_validate(item))
        except ValueError:
            logger.warning("activity_log skipped_invalid_entry=%s", str(item)[:200])
    return entries


class ActivityLog:
    def __init__(self, store: SyncStateStore, *, limit: int = ACTIVITY_HISTORY_LIMIT) -> None:
        self.store = store
        self.limit = limit

    def history(self) -> list[ActivityEntry]:
        return _parse_activities(self.store.get(RECENT_ACTIVITY_KEY))

    def recent(self, limit: int | None = None) -> list[ActivityEntry]:
        entries = self.history()
        return entries if limit is None else entries[: max(0, limit)]

    def append(self, summary: RunSummary) -> list[ActivityEntry]:
        entries = record(self.history(), summary, limit=self.limit)
        self.store.set(
            RECENT_ACTIVITY_KEY,
            {"activities": [entry.model_dump(mode="json") for entry in entries]},
        )
        logger.info("activity_log appended message=%r size=%s", summary.message, len(entries))
        return entries

    def last_sync_time(self) -> str | None:
        payload = self.store.get(LAST_SYNC_TIME_KEY)
        if isinstance(payload, dict):
            value = payload.get(LAST_SYNC_TIME_KEY)
            return str(value) if value else None
        return None

    def mark_synced(self, timestamp: str) -> None:
        self.store.set(LAST_SYNC_TIME_KEY, {LAST_SYNC_TIME_KEY: timestamp})
