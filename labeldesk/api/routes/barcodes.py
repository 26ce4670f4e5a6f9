"""Barcode helpers: EAN-13 completion, barcode templates and previews via the catalog API."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from labeldesk.api.routes.auth import get_current_user
from labeldesk.api.routes.catalog import catalog_api_error, get_catalog_client
from labeldesk.core.errors import ApiError, invalid_input
from labeldesk.schemas.auth import OkResponse, PublicUser
from labeldesk.schemas.barcode import (
    BarcodePreviewResponse,
    BarcodeStructure,
    BarcodeTemplate,
    BarcodeTemplateSave,
    BarcodeTemplatesResponse,
    Ean13Request,
    Ean13Response,
)
from labeldesk.services.barcode_templates import (
    InvalidBarcodeStructure,
    default_structure,
    parse_structure,
    template_from_api,
    template_payload,
)
from labeldesk.services.catalog_client import CatalogApiError, CatalogClient
from labeldesk.services.ean13 import is_valid_ean13, make_ean13, normalize_digits

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/ean13", response_model=Ean13Response)
def post_ean13(
    body: Ean13Request,
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> Ean13Response:
    """Complete free-form input into an EAN-13 code and report whether it is valid."""
    ean13 = make_ean13(body.value)
    return Ean13Response(
        input=body.value,
        digits=normalize_digits(body.value),
        ean13=ean13,
        valid=ean13 is not None and is_valid_ean13(ean13),
    )


@router.get("/templates/default", response_model=BarcodeStructure)
def get_default_structure(
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> BarcodeStructure:
    """Starting point for a new template: EAN-13 with the 460 prefix."""
    return default_structure()


@router.get("/templates", response_model=BarcodeTemplatesResponse)
async def list_templates(
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> BarcodeTemplatesResponse:
    """Templates stored by the catalog API; items whose structure cannot be parsed are skipped."""
    try:
        items = await client.barcodes.list()
    except CatalogApiError as e:
        raise catalog_api_error(e) from e

    templates: list[BarcodeTemplate] = []
    for item in items if isinstance(items, list) else []:
        try:
            templates.append(template_from_api(item))
        except InvalidBarcodeStructure as e:
            logger.warning("Skipping barcode template", extra={"reason": e.message})
    return BarcodeTemplatesResponse(templates=templates)


def _save_payload(body: BarcodeTemplateSave) -> dict[str, Any]:
    name = (body.name or "").strip()
    if not name:
        raise invalid_input()
    try:
        return template_payload(name, body.barcode_type, body.fields)
    except InvalidBarcodeStructure as e:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "INVALID_INPUT", e.message) from e


def _saved_template(data: Any) -> BarcodeTemplate:
    try:
        return template_from_api(data)
    except InvalidBarcodeStructure as e:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "CATALOG_ERROR", e.message) from e


@router.post("/templates", response_model=BarcodeTemplate, status_code=status.HTTP_201_CREATED)
async def create_template(
    body: BarcodeTemplateSave,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> BarcodeTemplate:
    payload = _save_payload(body)
    try:
        created = await client.barcodes.create(payload)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e
    return _saved_template(created)


@router.put("/templates/{template_id}", response_model=BarcodeTemplate)
async def replace_template(
    template_id: str,
    body: BarcodeTemplateSave,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> BarcodeTemplate:
    payload = _save_payload(body)
    try:
        updated = await client.barcodes.update(template_id, payload)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e
    return _saved_template(updated)


@router.delete("/templates/{template_id}", response_model=OkResponse)
async def delete_template(
    template_id: str,
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> OkResponse:
    try:
        await client.barcodes.delete(template_id)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e
    return OkResponse()


@router.post("/preview", response_model=BarcodePreviewResponse)
async def post_preview(
    structure: Annotated[Any, Body()],
    client: Annotated[CatalogClient, Depends(get_catalog_client)],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> BarcodePreviewResponse:
    """Render a structure (object or JSON string) to a PNG through the catalog API."""
    try:
        parsed = parse_structure(structure)
    except InvalidBarcodeStructure as e:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "INVALID_INPUT", e.message) from e
    try:
        png = await client.barcodes.generate(parsed)
    except CatalogApiError as e:
        raise catalog_api_error(e) from e
    return BarcodePreviewResponse(png=png)
