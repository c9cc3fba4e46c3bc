"""
Candidate discovery for the Dell asset sync.

Exactly one strategy runs per call, chosen from the run's SyncConfiguration:

- auto_detect: page through every asset and keep those whose serial number
  looks like a Dell service tag
- asset_types: one filtered page per configured asset type id
- unfiltered: a single unfiltered page

Transport failures on individual pages or asset types are logged and skipped;
the fetch only fails when none of the strategy's requests succeeded.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List

from config.constants import PAGE_SIZE
from shared.errors import FetchUnavailableError, TransportError
from shared.models.asset import Asset
from shared.models.sync import SyncConfiguration
from shared.tools.freshservice_client import AssetService
from shared.tools.service_tag import is_dell_service_tag

logger = logging.getLogger(__name__)

STRATEGY_AUTO_DETECT = "auto_detect"
STRATEGY_ASSET_TYPES = "asset_types"
STRATEGY_UNFILTERED = "unfiltered"


@dataclass
class FetchResult:
    strategy: str
    assets: List[Asset] = field(default_factory=list)
    requests_made: int = 0
    requests_failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def requests_succeeded(self) -> int:
        return self.requests_made - self.requests_failed


def select_strategy(config: SyncConfiguration) -> str:
    if config.auto_detect:
        return STRATEGY_AUTO_DETECT
    if config.asset_type_ids:
        return STRATEGY_ASSET_TYPES
    return STRATEGY_UNFILTERED


def asset_type_filter(asset_type_ids: tuple[str, ...] | list[str]) -> str:
    """Build a Freshservice filter query matching any of the asset types."""
    clauses = " OR ".join(f"asset_type_id:{asset_type_id}" for asset_type_id in asset_type_ids)
    return f'"{clauses}"'


def _fetch_auto_detect(service: AssetService, result: FetchResult) -> None:
    page = 1
    while True:
        result.requests_made += 1
        try:
            records = service.list_assets(page=page, per_page=PAGE_SIZE)
        except TransportError as exc:
            result.requests_failed += 1
            result.errors.append(f"page {page}: {exc}")
            logger.warning("asset_fetch strategy=auto_detect page=%s error=%s", page, exc)
            return

        matches = [asset for asset in records if is_dell_service_tag(asset.serial_number)]
        result.assets.extend(matches)
        logger.info(
            "asset_fetch strategy=auto_detect page=%s records=%s dell_matches=%s",
            page,
            len(records),
            len(matches),
        )
        if getattr(records, "received", len(records)) < PAGE_SIZE:
            return
        page += 1


def _fetch_asset_types(service: AssetService, config: SyncConfiguration, result: FetchResult) -> None:
    for asset_type_id in config.asset_type_ids:
        result.requests_made += 1
        try:
            records = service.list_assets(
                per_page=PAGE_SIZE,
                filter_query=asset_type_filter([asset_type_id]),
            )
        except TransportError as exc:
            result.requests_failed += 1
            result.errors.append(f"asset type {asset_type_id}: {exc}")
            logger.warning(
                "asset_fetch strategy=asset_types asset_type_id=%s error=%s",
                asset_type_id,
                exc,
            )
            continue
        result.assets.extend(records)
        logger.info(
            "asset_fetch strategy=asset_types asset_type_id=%s records=%s",
            asset_type_id,
            len(records),
        )


def _fetch_unfiltered(service: AssetService, result: FetchResult) -> None:
    result.requests_made += 1
    try:
        records = service.list_assets(per_page=PAGE_SIZE)
    except TransportError as exc:
        result.requests_failed += 1
        result.errors.append(str(exc))
        logger.warning("asset_fetch strategy=unfiltered error=%s", exc)
        return
    result.assets.extend(records)
    logger.info("asset_fetch strategy=unfiltered records=%s", len(records))


def fetch_candidates(service: AssetService, config: SyncConfiguration) -> FetchResult:
    """Fetch the assets a sync run should consider, in fetch order."""
    strategy = select_strategy(config)
    result = FetchResult(strategy=strategy)
    if strategy == STRATEGY_AUTO_DETECT:
        _fetch_auto_detect(service, result)
    elif strategy == STRATEGY_ASSET_TYPES:
        _fetch_asset_types(service, config, result)
    else:
        _fetch_unfiltered(service, result)

    if result.requests_made > 0 and result.requests_succeeded == 0:
        detail = "; ".join(result.errors) or "no request succeeded"
        raise FetchUnavailableError(f"{strategy} fetch failed: {detail}")
    return result
