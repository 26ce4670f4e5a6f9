"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from labeldesk.api.routes import router as api_router
from labeldesk.core.config import settings
from labeldesk.core.database import SessionLocal, init_db
from labeldesk.core.errors import ApiError
from labeldesk.services.users import ensure_initial_admin

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Create tables and make sure an admin account exists before serving."""
    init_db()
    db = SessionLocal()
    try:
        ensure_initial_admin(db, settings)
    finally:
        db.close()
    logger.info("API ready", extra={"environment": settings.APP_ENV, "prefix": settings.API_PREFIX})
    yield


app = FastAPI(
    title="LabelDesk API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.exception_handler(ApiError)
async def handle_api_error(_request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def handle_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters are client errors: 400, not FastAPI's default 422."""
    errors = exc.errors()
    code = "INVALID_INPUT"
    if errors and all(err.get("loc", ("",))[0] == "path" for err in errors):
        code = "INVALID_ID"
    return JSONResponse(status_code=400, content={"error": code})


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"error": "NOT_FOUND", "path": request.url.path},
        )
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": "METHOD_NOT_ALLOWED"})
    code = exc.detail if isinstance(exc.detail, str) else "HTTP_ERROR"
    return JSONResponse(status_code=exc.status_code, content={"error": code}, headers=exc.headers)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "INTERNAL_ERROR"})
