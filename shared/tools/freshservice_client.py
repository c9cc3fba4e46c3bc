"""
Freshservice REST v2 asset client.

``AssetService`` is the port the fetcher and reconciliation engine depend on;
``FreshserviceClient`` implements it over ``requests`` with basic auth and a
per-call timeout. Every ``requests`` failure surfaces as ``TransportError``
(``UpdateError`` for rejected updates) so callers can isolate failures per
page, per category, or per asset.
"""
from __future__ import annotations

import logging
from typing import Any, List, Protocol

import requests
from pydantic import ValidationError

from config import settings
from config.constants import ASSETS_PATH, PAGE_SIZE
from shared.errors import ConfigurationError, TransportError, UpdateError
from shared.models.asset import Asset

logger = logging.getLogger(__name__)


class AssetService(Protocol):
    def list_assets(
        self,
        *,
        page: int | None = None,
        per_page: int = PAGE_SIZE,
        filter_query: str | None = None,
    ) -> List[Asset]: ...

    def update_asset(self, asset_id: int | str, *, asset_tag: str, description: str) -> None: ...


def _error_detail(response: requests.Response | None, fallback: str) -> str:
    if response is None:
        return fallback
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if isinstance(payload, dict):
        description = payload.get("description")
        if isinstance(description, str) and description:
            return description
    return fallback


class AssetPage(List[Asset]):
    """Assets parsed from one response. ``received`` counts every raw record, skipped ones included."""

    def __init__(self, assets: List[Asset] | None = None, received: int | None = None) -> None:
        super().__init__(assets or [])
        self.received = len(self) if received is None else received


def _parse_assets(payload: Any) -> AssetPage:
    records = payload.get("assets", []) if isinstance(payload, dict) else []
    if not isinstance(records, list):
        return AssetPage()
    assets: List[Asset] = []
    for record in records:
        if not isinstance(record, dict) or record.get("id") is None:
            continue
        try:
            assets.append(Asset.model_validate(record))
        except ValidationError as exc:
            logger.warning(
                "freshservice_list skipped_invalid_asset id=%s errors=%s",
                record.get("id"),
                exc.error_count(),
            )
    return AssetPage(assets, received=len(records))


class FreshserviceClient:
    def __init__(
        self,
        domain: str,
        api_key: str,
        *,
        timeout: float = settings.REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        if not domain or not api_key:
            raise ConfigurationError("Freshservice domain and api_key are required")
        self.base_url = f"https://{domain}.freshservice.com"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (api_key, "X")
        self.session.headers.update({"Content-Type": "application/json"})

    @classmethod
    def from_install_params(cls, params: dict[str, Any]) -> "FreshserviceClient":
        return cls(str(params.get("domain") or ""), str(params.get("api_key") or ""))

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as exc:
            response = exc.response
            raise TransportError(
                _error_detail(response, str(exc)),
                status_code=response.status_code if response is not None else None,
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        return response

    def list_assets(
        self,
        *,
        page: int | None = None,
        per_page: int = PAGE_SIZE,
        filter_query: str | None = None,
    ) -> AssetPage:
        params: dict[str, Any] = {"per_page": per_page}
        if page is not None:
            params["page"] = page
        if filter_query:
            params["filter"] = filter_query
        response = self._request("GET", ASSETS_PATH, params=params)
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"invalid JSON from {ASSETS_PATH}: {exc}") from exc
        return _parse_assets(payload)

    def update_asset(self, asset_id: int | str, *, asset_tag: str, description: str) -> None:
        path = f"{ASSETS_PATH}/{asset_id}"
        try:
            response = self._request(
                "PUT",
                path,
                json={"asset_tag": asset_tag, "description": description},
            )
        except TransportError as exc:
            if exc.status_code is None:
                raise
            raise UpdateError(exc.detail, status_code=exc.status_code) from exc
        if response.status_code != 200:
            raise UpdateError(
                f"update not confirmed (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        logger.debug("freshservice_update asset_id=%s asset_tag=%s", asset_id, asset_tag)
