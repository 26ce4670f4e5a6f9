"""Request/response bodies for the catalog API pass-through routes."""

from pydantic import BaseModel, Field


class SendToStationsRequest(BaseModel):
    stations: list[str] = Field(..., min_length=1, description="Station UUIDs")


class ServerIpResponse(BaseModel):
    ip: str | None = None
