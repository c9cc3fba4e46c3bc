from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from config import settings
from config.constants import SYNC_JOB_NAME
from shared.errors import AssetSyncError
from shared.models.sync import SyncConfiguration
from shared.utils.env import env_bool

from asset_sync_platform.orchestrator.scheduler import JobScheduler, on_install, run_scheduler
from asset_sync_platform.orchestrator.state_store import SyncStateStore
from asset_sync_platform.orchestrator.stats import dashboard_stats
from asset_sync_platform.orchestrator.trigger import SyncTrigger

log = logging.getLogger(__name__)


def create_app(trigger: SyncTrigger | None = None, *, start_scheduler: bool | None = None) -> FastAPI:
    sync_trigger = trigger or SyncTrigger(SyncStateStore(settings.DB_PATH))
    scheduler = JobScheduler()
    run_schedule = env_bool("ASSET_SYNC_SCHEDULER_ENABLED", False) if start_scheduler is None else start_scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task: asyncio.Task | None = None
        if run_schedule:
            config = SyncConfiguration.from_install_params(sync_trigger.params_loader())
            install = on_install(scheduler, config)
            if install["success"]:
                task = asyncio.create_task(
                    run_scheduler(trigger=sync_trigger, request=scheduler.jobs[SYNC_JOB_NAME])
                )
            else:
                log.warning("Scheduler not started: %s", install["error"])
        yield
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="Dell Asset Sync", lifespan=lifespan)
    app.state.trigger = sync_trigger
    app.state.scheduler = scheduler

    @app.get("/health")
    def health() -> dict:
        return {
            "status": "ok",
            "sync_state": sync_trigger.state.value,
            "last_error": sync_trigger.last_error,
            "scheduled": scheduler.get(SYNC_JOB_NAME) is not None,
        }

    @app.post("/jobs/execute")
    async def execute_job(request: Request) -> dict[str, Any]:
        body = await request.body()
        # execute_job blocks for the whole run
        result = await asyncio.to_thread(sync_trigger.execute_job, body or b"{}")
        return result.to_payload()

    @app.get("/activity")
    def activity(limit: int | None = None) -> dict[str, Any]:
        entries = sync_trigger.activity.recent(limit)
        return {
            "lastSyncTime": sync_trigger.activity.last_sync_time(),
            "activities": [entry.model_dump(mode="json") for entry in entries],
        }

    @app.get("/stats")
    def stats() -> dict[str, Any]:
        params = sync_trigger.params_loader()
        try:
            service = sync_trigger.service_factory(params)
        except AssetSyncError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return dashboard_stats(service, SyncConfiguration.from_install_params(params), sync_trigger.activity)

    return app


app = create_app()
