from __future__ import annotations

import logging
from typing import Any

from config.constants import DASHBOARD_ACTIVITY_PREVIEW, PAGE_SIZE
from shared.errors import TransportError
from shared.models.sync import SyncConfiguration
from shared.tools.asset_fetcher import asset_type_filter
from shared.tools.freshservice_client import AssetService
from shared.tools.service_tag import is_dell_service_tag

from asset_sync_platform.orchestrator.activity import ActivityLog

logger = logging.getLogger(__name__)


def estimate_dell_assets(service: AssetService, config: SyncConfiguration) -> int | None:
    """Count Dell assets on the first page of the configured view.

    Display-only: a single request, no pagination. Returns None when the
    service can't be reached.
    """
    filter_query = None
    if not config.auto_detect and config.asset_type_ids:
        filter_query = asset_type_filter(config.asset_type_ids)
    try:
        assets = service.list_assets(per_page=PAGE_SIZE, filter_query=filter_query)
    except TransportError as exc:
        logger.warning("dashboard_stats asset_count_error=%s", exc)
        return None
    if config.auto_detect:
        return sum(1 for asset in assets if is_dell_service_tag(asset.serial_number))
    return len(assets)


def dashboard_stats(service: AssetService, config: SyncConfiguration, activity: ActivityLog) -> dict[str, Any]:
    return {
        "dell_asset_count": estimate_dell_assets(service, config),
        "last_sync_time": activity.last_sync_time(),
        "recent_activity": [
            {"timestamp": entry.timestamp, "message": entry.message}
            for entry in activity.recent(DASHBOARD_ACTIVITY_PREVIEW)
        ],
    }
