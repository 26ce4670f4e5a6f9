"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from labeldesk.api.routes import auth, barcodes, catalog, health, labels, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(labels.router, prefix="/labels", tags=["labels"])
router.include_router(barcodes.router, prefix="/barcodes", tags=["barcodes"])
router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
