"""Shared data type definitions (Owner, typed record keys, listing options)."""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from common.constants import CLIENT_KEY_PREFIX, FILE_KEY_PREFIX

if TYPE_CHECKING:
    from flowserver.schemas.records import FileRecord


@dataclass(frozen=True)
class Owner:
    """
    Explicit optional owner of a record.

    An owner either carries a client ID or is the system (unowned). The wire
    format keeps using the empty string for "no owner"; convert at the edge
    with from_id() and to_id().
    """
    client_id: Optional[str] = None

    @classmethod
    def system(cls) -> "Owner":
        return cls(None)

    @classmethod
    def of(cls, client_id: str) -> "Owner":
        if not client_id:
            raise ValueError("Owned records need a non-empty client ID")
        return cls(client_id)

    @classmethod
    def from_id(cls, owner_id: str) -> "Owner":
        return cls.of(owner_id) if owner_id else cls.system()

    @property
    def is_system(self) -> bool:
        return self.client_id is None

    def to_id(self) -> str:
        return self.client_id or ""


@dataclass(frozen=True)
class FileKey:
    """Engine key of a file record."""
    file_id: str

    def __str__(self) -> str:
        return f"{FILE_KEY_PREFIX}{self.file_id}"

    @classmethod
    def parse(cls, raw: str) -> Optional["FileKey"]:
        if not raw.startswith(FILE_KEY_PREFIX):
            return None
        return cls(raw[len(FILE_KEY_PREFIX):])


@dataclass(frozen=True)
class ClientKey:
    """Engine key of a client record."""
    client_id: str

    def __str__(self) -> str:
        return f"{CLIENT_KEY_PREFIX}{self.client_id}"

    @classmethod
    def parse(cls, raw: str) -> Optional["ClientKey"]:
        if not raw.startswith(CLIENT_KEY_PREFIX):
            return None
        return cls(raw[len(CLIENT_KEY_PREFIX):])


def is_reserved_key(raw: str) -> bool:
    """True when raw collides with the file or client key space."""
    return FileKey.parse(raw) is not None or ClientKey.parse(raw) is not None


@dataclass
class ListFilesOptions:
    """
    Filters and pagination window for a file listing.

    owner_id empty means the administrative view (every record).
    limit <= 0 means no upper bound.
    """
    search: str = ""
    owner_id: str = ""
    limit: int = 0
    offset: int = 0


@dataclass
class FileListResponse:
    """One page of a file listing."""
    files: List["FileRecord"]
    total: int
    skipped: int = field(default=0)
