"""Manages uploaded file payloads on disk: store, locate and delete."""

import shutil
from pathlib import Path
from typing import BinaryIO, Tuple

from common.logging_config import get_logger
from flowserver.exceptions import StorageError

logger = get_logger(__name__)


class BlobStorage:
    """
    Stores raw upload bytes as flat files under one directory.

    Callers pass a file name (the record ID) and keep the returned path as
    the record's stored_path.
    """

    def __init__(self, storage_dir: str):
        self.storage_dir = Path(storage_dir)

    def ensure_directory(self) -> None:
        """Ensure the storage directory exists."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def store(self, stream: BinaryIO, file_name: str) -> Tuple[str, int]:
        """
        Copy a stream into storage.

        Args:
            stream: Readable binary stream with the payload
            file_name: Name of the file inside the storage directory

        Returns:
            Tuple of (stored path, size in bytes)

        Raises:
            StorageError: If the payload cannot be written
        """
        filepath = self.storage_dir / file_name
        try:
            self.ensure_directory()
            with open(filepath, "wb") as out:
                shutil.copyfileobj(stream, out)
                size = out.tell()
        except OSError as e:
            logger.error(f"Failed to store payload [path={filepath}]: {e}", exc_info=True)
            raise StorageError(f"Failed to store file: {e}") from e

        logger.debug(f"Stored payload [path={filepath}] [size={size}]")
        return str(filepath), size

    def locate(self, stored_path: str) -> Path:
        """
        Return the path of a stored payload, checking it is still present.

        Raises:
            StorageError: If the payload is missing
        """
        filepath = Path(stored_path)
        if not filepath.is_file():
            raise StorageError(f"Stored payload is missing: {stored_path}")
        return filepath

    def delete(self, stored_path: str) -> None:
        """
        Delete a stored payload.

        Raises:
            StorageError: If the payload is missing or cannot be removed
        """
        try:
            Path(stored_path).unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete stored payload {stored_path}: {e}") from e
        logger.debug(f"Deleted payload [path={stored_path}]")
