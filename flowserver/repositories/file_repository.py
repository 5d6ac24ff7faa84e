"""File repository: file records stored in their owner's persona."""

from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from common.constants import APP_ID
from common.logging_config import get_logger
from common.types import FileKey
from flowserver.blob_storage import BlobStorage
from flowserver.exceptions import FileRecordNotFoundError, StorageError
from flowserver.persona import resolve_persona
from flowserver.repositories.client_repository import ClientRepository
from flowserver.schemas.records import FileRecord
from kvstore.engine import KeyValueEngine, UndecodableValue
from kvstore.exceptions import EngineError, KeyNotFoundError, UndecodableValueError

logger = get_logger(__name__)


class FileRepository:
    def __init__(
        self,
        engine: KeyValueEngine,
        client_repo: Optional[ClientRepository] = None,
        blob_storage: Optional[BlobStorage] = None,
    ):
        self.engine = engine
        self.client_repo = client_repo or ClientRepository(engine)
        self.blob_storage = blob_storage

    def save(self, record: FileRecord) -> None:
        persona = resolve_persona(record.owner)
        logger.debug(f"Saving file record [file_id={record.id}] [persona={persona}]")
        self.engine.set(persona, APP_ID, str(FileKey(record.id)), record.to_storage())

    def get(self, file_id: str) -> FileRecord:
        """
        Fetch a file record from whichever persona currently holds it.

        Raises:
            FileRecordNotFoundError: If no persona holds the record or it is undecodable
        """
        record, _ = self._fetch(file_id)
        record.owner_name = self.client_repo.display_name(record.owner_id)
        return record

    def update(self, file_id: str, name: str, owner_id: str, is_public: bool) -> FileRecord:
        """
        Rename, reassign or toggle visibility of a file record.

        An owner change first moves the key to the new owner's persona, then
        overwrites it there. The two steps are separate engine calls: if the
        overwrite fails the record stays relocated with its old content, and
        get() still finds it, so repeating the update repairs it.

        Raises:
            FileRecordNotFoundError: If the record does not exist, or vanishes before the move
            EngineError: If the move or the overwrite fails
        """
        record, old_persona = self._fetch(file_id)
        new_persona = resolve_persona(owner_id)

        record.original_name = name
        record.owner_id = owner_id
        record.is_public = is_public

        key = str(FileKey(file_id))
        if old_persona != new_persona:
            logger.info(f"Relocating file record [file_id={file_id}] [from={old_persona}] [to={new_persona}]")
            try:
                self.engine.move(old_persona, new_persona, APP_ID, key)
            except KeyNotFoundError:
                raise FileRecordNotFoundError(f"File {file_id} not found")

        try:
            self.engine.set(new_persona, APP_ID, key, record.to_storage())
        except EngineError as e:
            if old_persona != new_persona:
                logger.error(
                    f"File record relocated but content not updated [file_id={file_id}] "
                    f"[from={old_persona}] [to={new_persona}]: {e}"
                )
            raise

        record.owner_name = self.client_repo.display_name(record.owner_id)
        logger.info(f"File record updated [file_id={file_id}]")
        return record

    def delete(self, file_id: str) -> None:
        """
        Delete a file record and its stored payload.

        A payload that cannot be deleted is logged and left behind; the
        record is removed regardless.

        Raises:
            FileRecordNotFoundError: If the record does not exist
        """
        record, persona = self._fetch(file_id)

        if self.blob_storage is None:
            logger.warning(
                f"No blob storage configured; payload left behind "
                f"[file_id={file_id}] [path={record.stored_path}]"
            )
        else:
            try:
                self.blob_storage.delete(record.stored_path)
            except StorageError as e:
                logger.error(f"Failed to delete file from storage [file_id={file_id}]: {e}")

        self.engine.delete(persona, APP_ID, str(FileKey(file_id)))
        logger.info(f"File record deleted [file_id={file_id}]")

    def find_by_download_link(self, download_link: str) -> FileRecord:
        records, _ = self.scan()
        for record in records:
            if record.download_link == download_link:
                record.owner_name = self.client_repo.display_name(record.owner_id)
                return record
        raise FileRecordNotFoundError("No file matches the download link")

    def scan(self) -> Tuple[List[FileRecord], int]:
        """
        Decode every file record across all personas from one engine dump.

        Returns:
            Tuple of (records in dump order, number of undecodable entries skipped)
        """
        dump = self.engine.dump_app(APP_ID)
        records = []
        skipped = 0
        for persona, app_store in dump.items():
            for raw_key, value in app_store.items():
                if FileKey.parse(raw_key) is None:
                    continue
                record = self._decode(value)
                if record is None:
                    logger.debug(f"Skipping undecodable file record [key={raw_key}] [persona={persona}]")
                    skipped += 1
                    continue
                records.append(record)
        return records, skipped

    def _fetch(self, file_id: str) -> Tuple[FileRecord, str]:
        key = str(FileKey(file_id))
        try:
            _, persona = self.engine.get_global(APP_ID, key)
            value = self.engine.get(persona, APP_ID, key)
        except KeyNotFoundError:
            raise FileRecordNotFoundError(f"File {file_id} not found")
        except UndecodableValueError:
            logger.warning(f"Stored file record is undecodable [file_id={file_id}]")
            raise FileRecordNotFoundError(f"File {file_id} not found")

        record = self._decode(value)
        if record is None:
            logger.warning(f"Stored file record is undecodable [file_id={file_id}] [persona={persona}]")
            raise FileRecordNotFoundError(f"File {file_id} not found")
        return record, persona

    @staticmethod
    def _decode(value: Any) -> Optional[FileRecord]:
        if isinstance(value, UndecodableValue):
            return None
        try:
            return FileRecord.model_validate(value)
        except ValidationError:
            return None
