"""Repository layer for record access."""

from flowserver.repositories.client_repository import ClientRepository
from flowserver.repositories.file_repository import FileRepository

__all__ = [
    "ClientRepository",
    "FileRepository",
]
