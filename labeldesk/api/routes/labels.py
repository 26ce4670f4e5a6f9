"""Label document endpoints: starter document, normalization, designer edits and placeholder rendering."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from labeldesk.api.routes.auth import get_current_user
from labeldesk.core.errors import invalid_input
from labeldesk.schemas.auth import PublicUser
from labeldesk.schemas.label import EditRequest, LabelDocument, RenderRequest
from labeldesk.services.label_document import (
    InvalidLabelDocument,
    apply_edits,
    default_document,
    normalize_document,
    render_document,
)

router = APIRouter()


@router.get("/default", response_model=LabelDocument)
def get_default_document(
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> LabelDocument:
    return default_document()


@router.post("/normalize", response_model=LabelDocument)
def post_normalize(
    document: Annotated[Any, Body()],
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> LabelDocument:
    """
    Validate a designer document: clamp numbers into range, drop unknown elements.
    400 INVALID_INPUT when the top-level shape is not a version-1 document.
    """
    try:
        return normalize_document(document)
    except InvalidLabelDocument:
        raise invalid_input()


@router.post("/render", response_model=LabelDocument)
def post_render(
    body: RenderRequest,
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> LabelDocument:
    """Normalize, then substitute {{placeholders}} in text and barcode elements."""
    try:
        doc = normalize_document(body.document)
    except InvalidLabelDocument:
        raise invalid_input()
    return render_document(doc, body.values)


@router.post("/edit", response_model=LabelDocument)
def post_edit(
    body: EditRequest,
    _user: Annotated[PublicUser, Depends(get_current_user)],
) -> LabelDocument:
    """Normalize, then apply move/resize/rotate/delete/layer edits in order."""
    try:
        doc = normalize_document(body.document)
    except InvalidLabelDocument:
        raise invalid_input()
    return apply_edits(doc, body.edits)
