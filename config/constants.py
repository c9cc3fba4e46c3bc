"""
Domain constants for the asset sync service.

These values encode Freshservice API conventions and the sync job's business
rules. They don't change per deployment.

For runtime/deployment config, see config.settings.
"""
from __future__ import annotations


# =============================================================================
# JOB
# =============================================================================

SYNC_JOB_NAME: str = "dell_asset_sync"

# Install handler schedules the first run this long after registration
SCHEDULE_START_DELAY_SECONDS: int = 60

DEFAULT_SYNC_INTERVAL_HOURS: int = 24


# =============================================================================
# FRESHSERVICE API
# =============================================================================

ASSETS_PATH: str = "/api/v2/assets"

# A page with fewer records than this is the last page
PAGE_SIZE: int = 100


# =============================================================================
# ACTIVITY HISTORY
# =============================================================================

ACTIVITY_HISTORY_LIMIT: int = 50
DASHBOARD_ACTIVITY_PREVIEW: int = 5

LAST_SYNC_TIME_KEY: str = "lastSyncTime"
RECENT_ACTIVITY_KEY: str = "recentActivity"

SERVICE_TAG_LINE_PREFIX: str = "Service Tag: "
