"""
Pydantic models for a reconciliation run.

- SyncConfiguration: install parameters resolved for one run
- AssetOutcome: what happened to one asset
- RunSummary: ordered outcomes of a run plus its counters
- ActivityEntry: one row of the bounded activity history
- JobResult: structured answer of the manual/scheduled job surface
- ScheduleRequest: recurring job registration handed to the scheduler
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, computed_field

from config.constants import DEFAULT_SYNC_INTERVAL_HOURS, SYNC_JOB_NAME
from shared.utils.env import TRUTHY


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return bool(value)


def _positive_int(value: Any, default: int) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


class SyncConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    auto_detect: bool = False
    asset_type_ids: tuple[str, ...] = ()
    sync_interval_hours: int = DEFAULT_SYNC_INTERVAL_HOURS

    @classmethod
    def from_install_params(cls, params: Mapping[str, Any]) -> "SyncConfiguration":
        raw_ids = params.get("dell_asset_type_ids") or ""
        if isinstance(raw_ids, (list, tuple)):
            candidates = [str(item) for item in raw_ids]
        else:
            candidates = str(raw_ids).split(",")
        asset_type_ids = tuple(item.strip() for item in candidates if item.strip())
        return cls(
            auto_detect=_truthy(params.get("auto_detect_dell", False)),
            asset_type_ids=asset_type_ids,
            sync_interval_hours=_positive_int(params.get("sync_schedule"), DEFAULT_SYNC_INTERVAL_HOURS),
        )


class OutcomeTag(str, Enum):
    """Classification of what happened to one asset during a run."""
    UPDATED = "updated"
    SKIPPED_NO_SERIAL = "skipped_no_serial"
    SKIPPED_ALREADY_MATCHING = "skipped_already_matching"
    SKIPPED_NOT_VENDOR_FORMAT = "skipped_not_vendor_format"
    ERROR = "error"


SKIP_REASONS: dict[OutcomeTag, str] = {
    OutcomeTag.SKIPPED_NO_SERIAL: "No serial number found",
    OutcomeTag.SKIPPED_ALREADY_MATCHING: "Asset tag already matches serial number",
    OutcomeTag.SKIPPED_NOT_VENDOR_FORMAT: "Serial number does not match Dell service tag format",
}


class AssetOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    asset_id: int | str
    asset_name: str = ""
    asset_type_id: int | str | None = None
    tag: OutcomeTag
    new_asset_tag: str | None = None
    error: str | None = None

    @property
    def updated(self) -> bool:
        return self.tag is OutcomeTag.UPDATED

    @property
    def skip_reason(self) -> str | None:
        return SKIP_REASONS.get(self.tag)


class RunSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str
    total_assets: int
    outcomes: tuple[AssetOutcome, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def updated_assets(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.updated)

    @property
    def message(self) -> str:
        return f"Dell Asset Sync: {self.updated_assets}/{self.total_assets} assets updated"

    def count(self, tag: OutcomeTag) -> int:
        return sum(1 for outcome in self.outcomes if outcome.tag is tag)


class ActivityEntry(BaseModel):
    timestamp: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class JobResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    updated_assets: int = Field(default=0, alias="updatedAssets")
    total_assets: int = Field(default=0, alias="totalAssets")
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ScheduleRequest(BaseModel):
    name: str = SYNC_JOB_NAME
    schedule_at: datetime
    repeat_time_unit: str = "hours"
    repeat_frequency: int = DEFAULT_SYNC_INTERVAL_HOURS
    data: dict[str, Any] = Field(default_factory=dict)
