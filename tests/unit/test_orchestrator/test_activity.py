from __future__ import annotations

from shared.models.sync import AssetOutcome, OutcomeTag, RunSummary
from asset_sync_platform.orchestrator import activity
from asset_sync_platform.orchestrator.state_store import SyncStateStore


def _outcome(asset_id: int, tag: OutcomeTag) -> AssetOutcome:
    return AssetOutcome(asset_id=asset_id, asset_name=f"asset-{asset_id}", tag=tag)


def _summary(index: int) -> RunSummary:
    return activity.summarize(
        [_outcome(index, OutcomeTag.UPDATED)],
        timestamp=f"2026-10-19T08:{index % 60:02d}:00+00:00",
    )


def test_updated_count_tracks_outcome_tags() -> None:
    tags = [
        OutcomeTag.UPDATED,
        OutcomeTag.SKIPPED_NO_SERIAL,
        OutcomeTag.UPDATED,
        OutcomeTag.ERROR,
        OutcomeTag.SKIPPED_ALREADY_MATCHING,
        OutcomeTag.SKIPPED_NOT_VENDOR_FORMAT,
    ]
    summary = activity.summarize(_outcome(i, tag) for i, tag in enumerate(tags))

    assert summary.total_assets == 6
    assert summary.updated_assets == 2
    assert summary.message == "Dell Asset Sync: 2/6 assets updated"
    assert summary.model_dump()["updated_assets"] == 2


def test_record_prepends_newest_entry() -> None:
    history = activity.record([], _summary(1))
    history = activity.record(history, _summary(2))

    assert [entry.timestamp for entry in history] == [
        "2026-10-19T08:02:00+00:00",
        "2026-10-19T08:01:00+00:00",
    ]
    assert history[0].message == "Dell Asset Sync: 1/1 assets updated"
    assert history[0].details["outcomes"][0]["tag"] == "updated"


def test_record_caps_history_and_evicts_oldest() -> None:
    history: list = []
    for index in range(1, 76):
        history = activity.record(history, _summary(index))
        assert len(history) <= 50

    assert len(history) == 50
    assert history[0].details["outcomes"][0]["asset_id"] == 75
    assert history[-1].details["outcomes"][0]["asset_id"] == 26


def test_record_does_not_mutate_input_history() -> None:
    original = activity.record([], _summary(1))
    snapshot = list(original)

    activity.record(original, _summary(2))

    assert original == snapshot


def test_activity_log_persists_history_and_last_sync(tmp_path) -> None:
    store = SyncStateStore(tmp_path / "state.db")
    log = activity.ActivityLog(store, limit=3)

    assert log.last_sync_time() is None
    assert log.recent() == []

    for index in range(1, 6):
        log.append(_summary(index))
    log.mark_synced("2026-10-19T08:05:00+00:00")

    reopened = activity.ActivityLog(SyncStateStore(tmp_path / "state.db"))
    assert [entry.timestamp[-11:-6] for entry in reopened.recent()] == ["05:00", "04:00", "03:00"]
    assert len(reopened.recent(2)) == 2
    assert reopened.last_sync_time() == "2026-10-19T08:05:00+00:00"
    assert store.get("recentActivity")["activities"][0]["message"] == "Dell Asset Sync: 1/1 assets updated"


def test_activity_log_skips_corrupt_entries(tmp_path) -> None:
    store = SyncStateStore(tmp_path / "state.db")
    store.set(
        "recentActivity",
        {"activities": [{"timestamp": "2026-10-19T08:00:00+00:00", "message": "ok"}, "garbage", {"message": 1}]},
    )

    entries = activity.ActivityLog(store).history()

    assert [entry.message for entry in entries] == ["ok"]


def test_state_store_overwrites_values(tmp_path) -> None:
    store = SyncStateStore(tmp_path / "nested" / "state.db")

    store.set("lastSyncTime", {"lastSyncTime": "a"})
    store.set("lastSyncTime", {"lastSyncTime": "b"})

    assert store.get("lastSyncTime") == {"lastSyncTime": "b"}
    assert store.get("missing") is None
