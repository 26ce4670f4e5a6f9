"""Pydantic request/response schemas."""

from labeldesk.schemas.auth import (
    CreateUserRequest,
    DeleteUserResponse,
    LoginRequest,
    OkResponse,
    PublicUser,
    UserResponse,
    UserRole,
    UsersListResponse,
)
from labeldesk.schemas.barcode import (
    BarcodeField,
    BarcodeStructure,
    BarcodePreviewResponse,
    BarcodeTemplate,
    BarcodeTemplateSave,
    BarcodeTemplatesResponse,
    Ean13Request,
    Ean13Response,
)
from labeldesk.schemas.catalog import SendToStationsRequest, ServerIpResponse
from labeldesk.schemas.health import HealthResponse
from labeldesk.schemas.label import (
    BarcodeElement,
    EditRequest,
    LabelCanvas,
    LabelDocument,
    LabelEdit,
    LabelElement,
    RectElement,
    RenderRequest,
    TextElement,
)

__all__ = [
    "BarcodeElement",
    "BarcodeField",
    "BarcodePreviewResponse",
    "BarcodeStructure",
    "BarcodeTemplate",
    "BarcodeTemplateSave",
    "BarcodeTemplatesResponse",
    "CreateUserRequest",
    "DeleteUserResponse",
    "Ean13Request",
    "Ean13Response",
    "EditRequest",
    "HealthResponse",
    "LabelCanvas",
    "LabelDocument",
    "LabelEdit",
    "LabelElement",
    "LoginRequest",
    "OkResponse",
    "PublicUser",
    "RectElement",
    "RenderRequest",
    "SendToStationsRequest",
    "ServerIpResponse",
    "TextElement",
    "UserResponse",
    "UserRole",
    "UsersListResponse",
]
