"""Pydantic schemas for file operation endpoints."""

from typing import List

from pydantic import BaseModel, Field

from flowserver.schemas.records import FileRecord


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileRecord]
    total: int


class UpdateFileRequest(BaseModel):
    """Request model for renaming, reassigning or toggling a file."""
    original_name: str = Field(..., min_length=1)
    owner_id: str
    is_public: bool = False
