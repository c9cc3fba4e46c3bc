"""
Sync trigger, the single entry point for manual and scheduled Dell asset syncs.

A run moves idle → running → completed | failed. Only one run may be in
flight per process; a second trigger while running is rejected.
"""
from __future__ import annotations

from enum import Enum
import json
import logging
import threading
from typing import Any, Callable, Mapping

from config import settings
from config.constants import SYNC_JOB_NAME
from shared.errors import (
    AssetSyncError,
    ConfigurationError,
    SyncAlreadyRunningError,
)
from shared.models.sync import JobResult, OutcomeTag, RunSummary, SyncConfiguration
from shared.tools.asset_fetcher import fetch_candidates
from shared.tools.freshservice_client import AssetService, FreshserviceClient

from asset_sync_platform.orchestrator.activity import ActivityLog
from asset_sync_platform.orchestrator.reconcile import reconcile
from asset_sync_platform.orchestrator.state_store import SyncStateStore

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[Mapping[str, Any]], AssetService]
ParamsLoader = Callable[[], Mapping[str, Any]]


class TriggerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _default_service_factory(params: Mapping[str, Any]) -> AssetService:
    return FreshserviceClient.from_install_params(dict(params))


def parse_job_payload(payload: Any) -> dict[str, Any]:
    """Decode a job payload given as a mapping, JSON text, or JSON bytes."""
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid job payload: {exc.msg}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigurationError("Invalid job payload: expected an object")
    data = payload.get("data")
    if isinstance(data, Mapping) and "name" in data and "name" not in payload:
        # scheduler events carry the job name under "data"
        return dict(data)
    return dict(payload)


class SyncTrigger:
    def __init__(
        self,
        store: SyncStateStore,
        *,
        params_loader: ParamsLoader = settings.install_params,
        service_factory: ServiceFactory = _default_service_factory,
        max_workers: int = settings.MAX_WORKERS,
    ) -> None:
        self.activity = ActivityLog(store)
        self.params_loader = params_loader
        self.service_factory = service_factory
        self.max_workers = max_workers
        self.state = TriggerState.IDLE
        self.last_error: str | None = None
        self._lock = threading.Lock()
        self._run_count = 0

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run(self, source: str = "manual") -> RunSummary:
        if not self._lock.acquire(blocking=False):
            logger.warning("sync_rejected source=%s reason=already_running", source)
            raise SyncAlreadyRunningError("Sync already running")
        try:
            self._run_count += 1
            self.state = TriggerState.RUNNING
            self.last_error = None
            summary = self._execute(self._run_count, source)
        except Exception as exc:
            self.state = TriggerState.FAILED
            self.last_error = str(exc)
            logger.exception("sync_failed run=%s source=%s error=%s", self._run_count, source, exc)
            raise
        else:
            self.state = TriggerState.COMPLETED
            return summary
        finally:
            self._lock.release()

    def _execute(self, run: int, source: str) -> RunSummary:
        logger.info("sync_step run=%s step=start source=%s", run, source)
        params = self.params_loader()
        config = SyncConfiguration.from_install_params(params)
        service = self.service_factory(params)

        fetched = fetch_candidates(service, config)
        logger.info(
            "sync_step run=%s step=fetch_complete strategy=%s assets=%s requests=%s failed_requests=%s",
            run,
            fetched.strategy,
            len(fetched.assets),
            fetched.requests_made,
            fetched.requests_failed,
        )

        summary = reconcile(fetched.assets, service, max_workers=self.max_workers)
        logger.info(
            "sync_step run=%s step=reconcile_complete updated=%s total=%s no_serial=%s matching=%s not_dell=%s errors=%s",
            run,
            summary.updated_assets,
            summary.total_assets,
            summary.count(OutcomeTag.SKIPPED_NO_SERIAL),
            summary.count(OutcomeTag.SKIPPED_ALREADY_MATCHING),
            summary.count(OutcomeTag.SKIPPED_NOT_VENDOR_FORMAT),
            summary.count(OutcomeTag.ERROR),
        )

        try:
            self.activity.append(summary)
            self.activity.mark_synced(summary.timestamp)
        except Exception as exc:
            logger.exception("sync_step run=%s step=record_error error=%s", run, exc)
        logger.info("sync_step run=%s step=complete message=%r", run, summary.message)
        return summary

    def _run_job(self, source: str) -> JobResult:
        try:
            summary = self.run(source=source)
        except SyncAlreadyRunningError as exc:
            return JobResult(success=False, error=str(exc))
        except Exception as exc:
            message = str(exc) if isinstance(exc, AssetSyncError) else f"{type(exc).__name__}: {exc}"
            return JobResult(success=False, error=message)
        return JobResult(
            success=True,
            updated_assets=summary.updated_assets,
            total_assets=summary.total_assets,
        )

    def execute_job(self, payload: Any) -> JobResult:
        """Manual invocation surface: run the named job and report the outcome."""
        try:
            job = parse_job_payload(payload)
        except ConfigurationError as exc:
            return JobResult(success=False, error=str(exc))
        if job.get("name") != SYNC_JOB_NAME:
            logger.warning("execute_job unknown_job=%s", job.get("name"))
            return JobResult(success=False, error="Unknown job name")
        return self._run_job("manual")

    def scheduled_event_handler(self, payload: Any) -> JobResult | None:
        try:
            job = parse_job_payload(payload)
        except ConfigurationError as exc:
            logger.error("scheduled_event invalid_payload error=%s", exc)
            return None
        name = job.get("name")
        logger.info("scheduled_event triggered name=%s", name)
        if name != SYNC_JOB_NAME:
            logger.warning("scheduled_event unknown_job=%s", name)
            return None
        return self._run_job("scheduled")
