"""
Exception taxonomy for the asset sync service.

Transport and update failures are per unit of work (one page, one category,
one asset) and are normally absorbed into partial results or Error outcomes.
Configuration, fetch-unavailable and already-running conditions fail the
whole run or request.
"""
from __future__ import annotations


class AssetSyncError(Exception):
    """Base class for asset sync failures."""


class TransportError(AssetSyncError):
    """Network or HTTP failure of a single remote call."""

    def __init__(self, detail: str, *, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class UpdateError(TransportError):
    """The remote service rejected an asset update."""


class ConfigurationError(AssetSyncError):
    """Unknown job, unparseable job payload, or missing connection settings."""


class FetchUnavailableError(AssetSyncError):
    """The selected discovery strategy could not complete a single request."""


class SyncAlreadyRunningError(AssetSyncError):
    """A sync run is already in progress in this process."""
