"""File service for business logic."""

from pathlib import Path
from typing import BinaryIO, Optional, Tuple

from common.logging_config import get_logger
from common.types import FileListResponse, ListFilesOptions
from flowserver.blob_storage import BlobStorage
from flowserver.exceptions import (
    FileRecordNotFoundError,
    MissingClientIdError,
    StorageError,
    UnauthorizedAccessError,
)
from flowserver.repositories.client_repository import ClientRepository
from flowserver.repositories.file_repository import FileRepository
from flowserver.schemas.records import FileRecord
from flowserver.service_locator import get_blob_storage, get_engine
from flowserver.services.listing_service import ListingService
from flowserver.utils import current_unix_time, generate_uuid, normalize_page
from kvstore.engine import KeyValueEngine

logger = get_logger(__name__)


class FileService:
    def __init__(
        self,
        engine: Optional[KeyValueEngine] = None,
        blob_storage: Optional[BlobStorage] = None,
    ):
        self.engine = engine or get_engine()
        self.blob_storage = blob_storage or get_blob_storage()
        self.client_repo = ClientRepository(self.engine)
        self.file_repo = FileRepository(
            self.engine, client_repo=self.client_repo, blob_storage=self.blob_storage
        )
        self.listing = ListingService(
            self.engine, file_repo=self.file_repo, client_repo=self.client_repo
        )

    def upload_file(
        self,
        file_data: BinaryIO,
        file_name: str,
        owner_id: str,
        is_public: bool = False,
    ) -> FileRecord:
        if not owner_id:
            raise MissingClientIdError("X-Client-ID header is required")

        file_id = generate_uuid()
        # The record ID doubles as the on-disk name
        stored_path, size = self.blob_storage.store(file_data, file_id)

        record = FileRecord(
            id=file_id,
            original_name=file_name,
            stored_path=stored_path,
            size=size,
            upload_time=current_unix_time(),
            owner_id=owner_id,
            download_link=generate_uuid(),
            is_public=is_public,
        )

        try:
            self.file_repo.save(record)
        except Exception as e:
            logger.error(f"Upload failed for file {file_id}: {e}")
            try:
                self.blob_storage.delete(stored_path)
            except StorageError as cleanup_error:
                logger.error(f"Failed to clean up orphaned payload {stored_path}: {cleanup_error}")
            raise

        record.owner_name = self.client_repo.display_name(owner_id)
        logger.info(f"Uploaded file {file_id} ({size} bytes) [owner_id={owner_id}] [is_public={is_public}]")
        return record

    def list_files(
        self,
        client_id: str,
        is_admin: bool,
        search: str = "",
        page: int = 1,
        limit: int = 0,
    ) -> FileListResponse:
        """
        List files visible to a caller.

        Admins get the global view; other callers see their own files and
        every public file.

        Raises:
            MissingClientIdError: If a non-admin caller has no client ID
        """
        if not is_admin and not client_id:
            raise MissingClientIdError("X-Client-ID header is required")

        limit, offset = normalize_page(page, limit)
        options = ListFilesOptions(
            search=search,
            owner_id="" if is_admin else client_id,
            limit=limit,
            offset=offset,
        )
        return self.listing.list_files(options)

    def get_file(self, file_id: str) -> FileRecord:
        return self.file_repo.get(file_id)

    def update_file(
        self,
        file_id: str,
        client_id: str,
        is_admin: bool,
        name: str,
        owner_id: str,
        is_public: bool,
    ) -> FileRecord:
        record = self.file_repo.get(file_id)
        self._check_access(record, client_id, is_admin, "update")

        # Only admins may hand a file to another owner
        final_owner_id = owner_id if is_admin else record.owner_id
        return self.file_repo.update(file_id, name, final_owner_id, is_public)

    def delete_file(self, file_id: str, client_id: str, is_admin: bool) -> None:
        record = self.file_repo.get(file_id)
        self._check_access(record, client_id, is_admin, "delete")
        self.file_repo.delete(file_id)

    def resolve_download(self, id_or_link: str) -> Tuple[FileRecord, Path]:
        """
        Find a file by ID, falling back to its public download link.

        Returns:
            Tuple of (record, path of the stored payload)

        Raises:
            FileRecordNotFoundError: If neither an ID nor a link matches
            StorageError: If the record exists but its payload is gone
        """
        try:
            record = self.file_repo.get(id_or_link)
        except FileRecordNotFoundError:
            record = self.file_repo.find_by_download_link(id_or_link)

        return record, self.blob_storage.locate(record.stored_path)

    @staticmethod
    def _check_access(record: FileRecord, client_id: str, is_admin: bool, action: str) -> None:
        if is_admin or (client_id and record.owner_id == client_id):
            return
        logger.warning(f"Denied {action} of file {record.id} [client_id={client_id or 'anonymous'}]")
        raise UnauthorizedAccessError(f"You don't have permission to {action} this file")
