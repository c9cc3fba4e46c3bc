from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Sequence

from config.constants import SERVICE_TAG_LINE_PREFIX
from shared.errors import TransportError
from shared.models.asset import Asset
from shared.models.sync import AssetOutcome, OutcomeTag, RunSummary
from shared.tools.freshservice_client import AssetService
from shared.tools.service_tag import is_dell_service_tag

from asset_sync_platform.orchestrator.activity import summarize

logger = logging.getLogger(__name__)


def service_tag_description(existing: str | None, serial_number: str) -> str:
    line = f"{SERVICE_TAG_LINE_PREFIX}{serial_number}"
    if existing:
        return f"{existing}\n\n{line}"
    return line


def _outcome(asset: Asset, tag: OutcomeTag, **extra: str) -> AssetOutcome:
    return AssetOutcome(
        asset_id=asset.id,
        asset_name=asset.name or "",
        asset_type_id=asset.asset_type_id,
        tag=tag,
        **extra,
    )


def decide(asset: Asset) -> OutcomeTag | None:
    """Return the skip tag for *asset*, or None when its tag should be updated."""
    serial_number = asset.serial_number
    if not serial_number or not serial_number.strip():
        return OutcomeTag.SKIPPED_NO_SERIAL
    if asset.asset_tag == serial_number:
        return OutcomeTag.SKIPPED_ALREADY_MATCHING
    if not is_dell_service_tag(serial_number):
        return OutcomeTag.SKIPPED_NOT_VENDOR_FORMAT
    return None


def process_asset(asset: Asset, service: AssetService) -> AssetOutcome:
    skip = decide(asset)
    if skip is not None:
        logger.debug("reconcile_skip asset_id=%s reason=%s", asset.id, skip.value)
        return _outcome(asset, skip)

    serial_number = asset.serial_number or ""
    try:
        service.update_asset(
            asset.id,
            asset_tag=serial_number,
            description=service_tag_description(asset.description, serial_number),
        )
    except TransportError as exc:
        logger.error("reconcile_update_failed asset_id=%s error=%s", asset.id, exc)
        return _outcome(asset, OutcomeTag.ERROR, error=str(exc))

    logger.info("reconcile_updated asset_id=%s service_tag=%s", asset.id, serial_number)
    return _outcome(asset, OutcomeTag.UPDATED, new_asset_tag=serial_number)


def _process_isolated(asset: Asset, service: AssetService) -> AssetOutcome:
    try:
        return process_asset(asset, service)
    except Exception as exc:
        logger.exception("reconcile_asset_error asset_id=%s error=%s", asset.id, exc)
        return _outcome(asset, OutcomeTag.ERROR, error=str(exc))


def reconcile(
    assets: Sequence[Asset],
    service: AssetService,
    *,
    max_workers: int = 1,
    timestamp: str | None = None,
) -> RunSummary:
    """Bring each Dell asset's tag in line with its serial number.

    Outcomes come back in input order whether updates run sequentially or on
    a bounded worker pool. A failing asset never stops the others.
    """
    slots: list[AssetOutcome | None] = [None] * len(assets)
    if max_workers <= 1 or len(assets) <= 1:
        for index, asset in enumerate(assets):
            slots[index] = _process_isolated(asset, service)
    else:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="asset-sync") as executor:
            futures = {
                index: executor.submit(_process_isolated, asset, service)
                for index, asset in enumerate(assets)
            }
            for index, future in futures.items():
                slots[index] = future.result()

    outcomes = [outcome for outcome in slots if outcome is not None]
    return summarize(outcomes, timestamp=timestamp)
