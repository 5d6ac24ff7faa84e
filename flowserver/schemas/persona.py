"""Pydantic schemas for persona endpoints."""

from pydantic import BaseModel, Field


class PersonaResponse(BaseModel):
    """Response model describing the calling persona."""
    persona: str
    name: str
    recovery_code: str
    version: str


class UpdateNameRequest(BaseModel):
    """Request model for naming (and registering) a client."""
    name: str = Field(..., min_length=1)


class UpdateNameResponse(BaseModel):
    """Response model for naming a client."""
    status: str = "success"
    id: str
    recovery_code: str


class RecoverRequest(BaseModel):
    """Request model for recovering a persona from its code."""
    code: str = Field(..., min_length=1)


class RecoverResponse(BaseModel):
    """Response model for persona recovery."""
    persona: str
    id: str
    name: str


class ActivateAdminRequest(BaseModel):
    """Request model for admin activation."""
    secret: str = Field(..., min_length=1)
