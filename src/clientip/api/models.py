"""Pydantic models for the client IP API."""

from pydantic import BaseModel, Field


class ClientIPResponse(BaseModel):
    """Resolved client address of the calling request."""

    client_ip: str = Field(description="Resolved client IP, empty when unknown")
    known: bool = Field(description="Whether any candidate passed validation")


class HealthResponse(BaseModel):
    status: str = "ok"
