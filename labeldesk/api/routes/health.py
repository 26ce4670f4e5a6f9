"""Liveness endpoint (no session required)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from labeldesk.core.config import settings
from labeldesk.core.database import check_db_connected, get_db
from labeldesk.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
