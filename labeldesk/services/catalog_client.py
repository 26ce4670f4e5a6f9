"""Async client for the external catalog API: nomenclature, packs, labels, stations, attributes, barcodes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from labeldesk.schemas.barcode import BarcodeStructure
from labeldesk.services.barcode_templates import structure_payload

if TYPE_CHECKING:
    from labeldesk.core.config import Settings

logger = logging.getLogger(__name__)


class CatalogApiError(Exception):
    """
    Raised when the catalog API is unreachable or answers with an error or a malformed body.

    status_code is the upstream HTTP status, or None when no response arrived.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(resp: httpx.Response, default: str) -> str:
    """Prefer the API's own {"error": ...} message; fall back to *default*."""
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"].strip():
        return body["error"]
    return default


class CatalogClient:
    """
    Thin REST client. Every resource path ends with a slash, as the API requires.

    One httpx.AsyncClient is opened per call; the API is polled and edited
    interactively, so there is no connection reuse to gain.
    """

    def __init__(self, settings: Settings) -> None:
        self.base_url = settings.CATALOG_API_URL.rstrip("/")
        self.timeout = max(1.0, min(120.0, settings.CATALOG_REQUEST_TIMEOUT_SEC))
        self.nomenclature = NomenclatureResource(self)
        self.packs = UpdatableResource(self, "packs", "pack")
        self.links = CatalogResource(self, "links", "link")
        self.labels = UpdatableResource(self, "labels", "label")
        self.stations = StationsResource(self)
        self.attributes = CatalogResource(self, "attributes", "attribute")
        self.barcodes = BarcodesResource(self)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        error: str,
        expect_body: bool = True,
    ) -> Any:
        """Send one request. Raises CatalogApiError with *error* (or the API's message) on failure."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                if json is None:
                    resp = await client.request(method, url)
                else:
                    resp = await client.request(method, url, json=json)
        except httpx.TimeoutException as e:
            logger.warning("Catalog API timeout", extra={"method": method, "path": path})
            raise CatalogApiError(f"{error}: request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("Catalog API unreachable", extra={"method": method, "path": path})
            raise CatalogApiError(f"{error}: catalog API is unreachable") from e

        if resp.status_code >= 400:
            message = _error_message(resp, error)
            logger.info(
                "Catalog API request failed",
                extra={"method": method, "path": path, "status_code": resp.status_code},
            )
            raise CatalogApiError(message, resp.status_code)
        if not expect_body:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise CatalogApiError(f"{error}: response is not JSON", resp.status_code) from e


class CatalogResource:
    """list / create / delete over ``<name>/`` and ``<name>/<id>/``. Links and attributes stop here."""

    def __init__(self, api: CatalogClient, name: str, singular: str) -> None:
        self.api = api
        self.name = name
        self.singular = singular

    def _item_path(self, item_id: int | str) -> str:
        return f"{self.name}/{item_id}/"

    async def list(self) -> Any:
        return await self.api.request("GET", f"{self.name}/", error=f"Failed to fetch {self.name}")

    async def create(self, data: dict[str, Any]) -> Any:
        return await self.api.request(
            "POST", f"{self.name}/", json=data, error=f"Failed to create {self.singular}"
        )

    async def delete(self, item_id: int | str) -> None:
        await self.api.request(
            "DELETE",
            self._item_path(item_id),
            error=f"Failed to delete {self.singular}",
            expect_body=False,
        )


class UpdatableResource(CatalogResource):
    """Resource that also accepts partial updates (PATCH ``<name>/<id>/``)."""

    async def update(self, item_id: int | str, data: dict[str, Any]) -> Any:
        return await self.api.request(
            "PATCH", self._item_path(item_id), json=data, error=f"Failed to update {self.singular}"
        )


class NomenclatureResource(UpdatableResource):
    def __init__(self, api: CatalogClient) -> None:
        super().__init__(api, "nomenclature", "nomenclature")

    async def send_to_stations(self, station_ids: list[str]) -> Any:
        """Push the current product list to the given stations."""
        return await self.api.request(
            "POST",
            "nomenclature/send_to_stations/",
            json={"stations": list(station_ids)},
            error="Failed to send to stations",
        )


class StationsResource(UpdatableResource):
    """Stations are addressed by UUID rather than numeric id."""

    def __init__(self, api: CatalogClient) -> None:
        super().__init__(api, "stations", "station")

    async def sync(self, station_uuid: str) -> Any:
        return await self.api.request(
            "POST", f"stations/{station_uuid}/sync_data/", error="Failed to sync data"
        )

    async def full_dump(self, station_uuid: str) -> Any:
        """Everything the station currently holds (products, labels, templates)."""
        return await self.api.request(
            "GET", f"stations/{station_uuid}/full_dump/", error="Failed to load station data"
        )

    async def server_ip(self) -> str | None:
        """Address stations should use to reach the server, or None if the API does not report one."""
        data = await self.api.request(
            "GET", "stations/server_ip/", error="Failed to fetch server IP"
        )
        if isinstance(data, dict) and isinstance(data.get("ip"), str):
            return data["ip"]
        return None


class BarcodesResource(UpdatableResource):
    def __init__(self, api: CatalogClient) -> None:
        super().__init__(api, "barcodes", "barcode template")

    async def generate(self, structure: BarcodeStructure) -> str:
        """Render a preview; returns the base64-encoded PNG."""
        data = await self.api.request(
            "POST",
            "barcodes/generate/",
            json={"barcode_structure": structure_payload(structure)},
            error="Failed to generate barcode preview",
        )
        png = data.get("png") if isinstance(data, dict) else None
        if not isinstance(png, str) or not png:
            # A 2xx answer without the image.
            raise CatalogApiError("Barcode preview response missing png", 200)
        return png
