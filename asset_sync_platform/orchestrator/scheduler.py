from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
import logging
from typing import Any

from config import settings
from config.constants import SCHEDULE_START_DELAY_SECONDS, SYNC_JOB_NAME
from shared.errors import ConfigurationError
from shared.models.sync import ScheduleRequest, SyncConfiguration
from shared.utils.env import env_value
from shared.utils.logging import setup_logging

from asset_sync_platform.orchestrator.state_store import SyncStateStore
from asset_sync_platform.orchestrator.trigger import SyncTrigger

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def build_schedule_request(config: SyncConfiguration, now: datetime | None = None) -> ScheduleRequest:
    current = _as_utc(now or datetime.now(UTC))
    return ScheduleRequest(
        name=SYNC_JOB_NAME,
        schedule_at=current + timedelta(seconds=SCHEDULE_START_DELAY_SECONDS),
        repeat_time_unit="hours",
        repeat_frequency=config.sync_interval_hours,
    )


def next_run_at(request: ScheduleRequest, now: datetime | None = None) -> datetime:
    """First occurrence of *request* at or after *now*."""
    if request.repeat_frequency <= 0:
        raise ValueError("repeat_frequency must be > 0")
    current = _as_utc(now or datetime.now(UTC))
    start = _as_utc(request.schedule_at)
    if current <= start:
        return start
    interval = timedelta(hours=request.repeat_frequency)
    elapsed_intervals = -(-(current - start) // interval)
    return start + interval * elapsed_intervals


class JobScheduler:
    """In-process registry of recurring jobs, keyed by job name."""

    def __init__(self) -> None:
        self.jobs: dict[str, ScheduleRequest] = {}

    def create(self, request: ScheduleRequest) -> ScheduleRequest:
        if request.name in self.jobs:
            raise ConfigurationError(f"Scheduled job already exists: {request.name}")
        self.jobs[request.name] = request
        logger.info(
            "schedule_created name=%s schedule_at=%s repeat=%s %s",
            request.name,
            request.schedule_at.isoformat(),
            request.repeat_frequency,
            request.repeat_time_unit,
        )
        return request

    def get(self, name: str) -> ScheduleRequest | None:
        return self.jobs.get(name)


def on_install(scheduler: JobScheduler, config: SyncConfiguration, now: datetime | None = None) -> dict[str, Any]:
    """Register the recurring Dell asset sync, as the app does on install."""
    try:
        request = scheduler.create(build_schedule_request(config, now=now))
    except ConfigurationError as exc:
        logger.error("install schedule_failed error=%s", exc)
        return {"success": False, "error": "Failed to schedule sync job"}
    return {"success": True, "schedule": request.model_dump(mode="json")}


async def run_scheduler(
    *,
    trigger: SyncTrigger,
    request: ScheduleRequest,
    max_cycles: int | None = None,
) -> None:
    logger.info(
        "scheduler_start name=%s schedule_at=%s repeat_hours=%s max_cycles=%s",
        request.name,
        request.schedule_at.isoformat(),
        request.repeat_frequency,
        max_cycles,
    )
    cycle = 0
    while max_cycles is None or cycle < max_cycles:
        target = next_run_at(request, now=datetime.now(UTC))
        sleep_for = max(0.0, (target - datetime.now(UTC)).total_seconds())
        await asyncio.sleep(sleep_for)

        cycle += 1
        result = await asyncio.to_thread(
            trigger.scheduled_event_handler,
            {"name": request.name, "data": request.data},
        )
        logger.info(
            "scheduler_cycle_complete cycle=%s success=%s updated=%s total=%s error=%s",
            cycle,
            result.success if result else None,
            result.updated_assets if result else None,
            result.total_assets if result else None,
            result.error if result else None,
        )
        if max_cycles is not None and cycle >= max_cycles:
            break
        # next occurrence must be strictly after the one just served
        request = request.model_copy(update={"schedule_at": target + timedelta(hours=request.repeat_frequency)})


async def main() -> None:
    max_cycles_raw = env_value("SCHEDULER_MAX_CYCLES")
    max_cycles = int(max_cycles_raw) if max_cycles_raw else None

    store = SyncStateStore(settings.DB_PATH)
    trigger = SyncTrigger(store)
    config = SyncConfiguration.from_install_params(settings.install_params())

    scheduler = JobScheduler()
    install = on_install(scheduler, config)
    if not install["success"]:
        raise ConfigurationError(install["error"])
    await run_scheduler(
        trigger=trigger,
        request=scheduler.jobs[SYNC_JOB_NAME],
        max_cycles=max_cycles,
    )


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())
