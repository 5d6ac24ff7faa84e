"""Pydantic schemas for records, API requests and responses."""

from flowserver.schemas.records import FileRecord, ClientRecord
from flowserver.schemas.files import ListFilesResponse, UpdateFileRequest
from flowserver.schemas.persona import (
    PersonaResponse,
    UpdateNameRequest,
    UpdateNameResponse,
    RecoverRequest,
    RecoverResponse,
    ActivateAdminRequest
)
from flowserver.schemas.clients import UpdateClientRequest
from flowserver.schemas.common import ErrorResponse, StatusResponse

__all__ = [
    "FileRecord",
    "ClientRecord",
    "ListFilesResponse",
    "UpdateFileRequest",
    "PersonaResponse",
    "UpdateNameRequest",
    "UpdateNameResponse",
    "RecoverRequest",
    "RecoverResponse",
    "ActivateAdminRequest",
    "UpdateClientRequest",
    "ErrorResponse",
    "StatusResponse"
]
