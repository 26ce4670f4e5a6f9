"""GET /api/health body."""

from typing import Literal

from pydantic import BaseModel, Field

DatabaseState = Literal["connected", "disconnected"]


class HealthResponse(BaseModel):
    """`ok` is what the browser polls; the rest is for operators."""

    ok: bool = True
    status: Literal["ok"] = "ok"
    environment: Literal["dev", "prod"]
    database: DatabaseState = Field(description="Result of a SELECT 1 against the SQLite file")
