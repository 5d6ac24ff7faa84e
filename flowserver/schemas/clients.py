"""Pydantic schemas for client administration endpoints."""

from pydantic import BaseModel, Field


class UpdateClientRequest(BaseModel):
    """Request model for an admin editing a client."""
    name: str = Field(..., min_length=1)
    recovery_code: str = Field(..., min_length=1)
    is_admin: bool = False
