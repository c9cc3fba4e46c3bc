from shared.models.asset import Asset
from shared.models.sync import (
    ActivityEntry,
    AssetOutcome,
    JobResult,
    OutcomeTag,
    RunSummary,
    ScheduleRequest,
    SyncConfiguration,
)

__all__ = [
    "ActivityEntry",
    "Asset",
    "AssetOutcome",
    "JobResult",
    "OutcomeTag",
    "RunSummary",
    "ScheduleRequest",
    "SyncConfiguration",
]
