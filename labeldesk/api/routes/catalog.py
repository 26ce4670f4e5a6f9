"""
Authenticated pass-through to the external catalog API.

Products (nomenclature), packs, links, labels, stations and attributes are
stored by the catalog service; this router forwards the designer's calls and
turns CatalogApiError into the usual ``{"error": CODE, "message": ...}`` body.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from labeldesk.api.routes.auth import get_current_user
from labeldesk.core.config import get_settings
from labeldesk.core.errors import ApiError
from labeldesk.schemas.auth import OkResponse, PublicUser
from labeldesk.schemas.catalog import SendToStationsRequest, ServerIpResponse
from labeldesk.services.catalog_client import (
    CatalogApiError,
    CatalogClient,
    CatalogResource,
    UpdatableResource,
)

logger = logging.getLogger(__name__)
router = APIRouter()

RESOURCE_NAMES = ("nomenclature", "packs", "links", "labels", "stations", "attributes")

# Upstream client errors the browser can act on; other statuses become 502.
PASS_THROUGH_STATUSES = frozenset({400, 404, 409, 422})


def get_catalog_client() -> CatalogClient:
    return CatalogClient(get_settings())


def catalog_api_error(e: CatalogApiError) -> ApiError:
    """No response -> 503; actionable 4xx passed through; anything else -> 502."""
    if e.status_code is None:
        return ApiError(status.HTTP_503_SERVICE_UNAVAILABLE, "CATALOG_UNAVAILABLE", e.message)
    if e.status_code in PASS_THROUGH_STATUSES:
        return ApiError(e.status_code, "CATALOG_REJECTED", e.message)
    logger.warning("Catalog API error", extra={"status_code": e.status_code})
    return ApiError(status.HTTP_502_BAD_GATEWAY, "CATALOG_ERROR", e.message)


def _resource(client: CatalogClient, name: str) -> CatalogResource:
    if name not in RESOURCE_NAMES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return getattr(client, name)


@router.post("/nomenclature/send_to_stations")
async def post_send_to_stations(
    body: SendToStationsRequest,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> Any:
    try:
        return await client.nomenclature.send_to_stations(body.stations)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e


@router.get("/stations/server_ip", response_model=ServerIpResponse)
async def get_server_ip(
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> ServerIpResponse:
    try:
        return ServerIpResponse(ip=await client.stations.server_ip())
    except CatalogApiError as e:
        raise catalog_api_error(e) from e


@router.post("/stations/{station_uuid}/sync")
async def post_station_sync(
    station_uuid: str,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> Any:
    try:
        return await client.stations.sync(station_uuid)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e


@router.get("/stations/{station_uuid}/full_dump")
async def get_station_dump(
    station_uuid: str,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> Any:
    try:
        return await client.stations.full_dump(station_uuid)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e


@router.get("/{resource}")
async def list_items(
    resource: str,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> Any:
    target = _resource(client, resource)
    try:
        return await target.list()
    except CatalogApiError as e:
        raise catalog_api_error(e) from e


@router.post("/{resource}", status_code=status.HTTP_201_CREATED)
async def create_item(
    resource: str,
    data: Annotated[dict[str, Any], Body()],
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> Any:
    target = _resource(client, resource)
    try:
        return await target.create(data)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e


@router.patch("/{resource}/{item_id}")
async def update_item(
    resource: str,
    item_id: str,
    data: Annotated[dict[str, Any], Body()],
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> Any:
    """Links and attributes cannot be edited in place: 405, delete and recreate instead."""
    target = _resource(client, resource)
    if not isinstance(target, UpdatableResource):
        raise ApiError(status.HTTP_405_METHOD_NOT_ALLOWED, "METHOD_NOT_ALLOWED")
    try:
        return await target.update(item_id, data)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e


@router.delete("/{resource}/{item_id}", response_model=OkResponse)
async def delete_item(
    resource: str,
    item_id: str,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> OkResponse:
    target = _resource(client, resource)
    try:
        await target.delete(item_id)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e
    logger.info("Catalog item deleted", extra={"resource": resource, "item_id": item_id})
    return OkResponse()
