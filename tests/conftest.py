from __future__ import annotations

import re
from typing import Any, Iterable

import pytest

from shared.errors import TransportError, UpdateError
from shared.models.asset import Asset

_ASSET_TYPE_CLAUSE = re.compile(r"asset_type_id:([\w-]+)")


class FakeAssetService:
    """In-memory stand-in for the Freshservice asset API."""

    def __init__(
        self,
        assets: Iterable[dict[str, Any]] = (),
        *,
        failing_pages: Iterable[int] = (),
        failing_asset_types: Iterable[str] = (),
        failing_updates: Iterable[Any] = (),
        fail_all_lists: bool = False,
    ) -> None:
        self.assets = [dict(asset) for asset in assets]
        self.failing_pages = set(failing_pages)
        self.failing_asset_types = {str(item) for item in failing_asset_types}
        self.failing_updates = set(failing_updates)
        self.fail_all_lists = fail_all_lists
        self.list_calls: list[dict[str, Any]] = []
        self.update_calls: list[dict[str, Any]] = []

    def list_assets(self, *, page=None, per_page=100, filter_query=None):
        self.list_calls.append({"page": page, "per_page": per_page, "filter_query": filter_query})
        if self.fail_all_lists:
            raise TransportError("connection refused")
        records = self.assets
        if filter_query:
            wanted = set(_ASSET_TYPE_CLAUSE.findall(filter_query))
            failing = wanted & self.failing_asset_types
            if failing:
                raise TransportError(f"HTTP 500 for asset type {sorted(failing)[0]}", status_code=500)
            records = [asset for asset in records if str(asset.get("asset_type_id")) in wanted]
        current_page = page or 1
        if current_page in self.failing_pages:
            raise TransportError(f"timeout on page {current_page}")
        start = (current_page - 1) * per_page
        return [Asset.model_validate(asset) for asset in records[start : start + per_page]]

    def update_asset(self, asset_id, *, asset_tag, description):
        self.update_calls.append({"asset_id": asset_id, "asset_tag": asset_tag, "description": description})
        if asset_id in self.failing_updates:
            raise UpdateError("Validation failed: asset_tag is locked", status_code=400)
        for asset in self.assets:
            if asset["id"] == asset_id:
                asset["asset_tag"] = asset_tag
                asset["description"] = description


def dell_serial(index: int) -> str:
    return f"DL{index:05d}"


def make_asset(asset_id: int, serial_number: str | None, *, asset_tag: str | None = "OLD001", **extra: Any) -> dict[str, Any]:
    record = {
        "id": asset_id,
        "name": f"Laptop {asset_id}",
        "asset_tag": asset_tag,
        "serial_number": serial_number,
        "asset_type_id": 5000,
        "description": None,
    }
    record.update(extra)
    return record


@pytest.fixture
def fake_service_cls() -> type[FakeAssetService]:
    return FakeAssetService


@pytest.fixture
def asset_factory():
    return make_asset


@pytest.fixture
def dell_serial_for():
    return dell_serial
