"""Pydantic models for the persisted record shapes."""

from typing import Any, Dict

from pydantic import BaseModel

from common.types import Owner


class FileRecord(BaseModel):
    """
    Metadata of one uploaded file.

    owner_id "" means system-owned. owner_name is resolved on every read
    and never persisted.
    """
    id: str
    original_name: str
    stored_path: str
    size: int
    upload_time: int
    owner_id: str
    owner_name: str = ""
    download_link: str
    is_public: bool = False

    @property
    def owner(self) -> Owner:
        return Owner.from_id(self.owner_id)

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"owner_name"})


class ClientRecord(BaseModel):
    """A client identity, always stored in the system persona."""
    id: str
    name: str
    recovery_code: str
    last_active: int
    is_admin: bool = False

    def to_storage(self) -> Dict[str, Any]:
        return self.model_dump()
