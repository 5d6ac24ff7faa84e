"""Cross-persona file listing with visibility, search and pagination."""

from typing import Dict, List, Optional

from common.logging_config import get_logger
from common.types import FileListResponse, ListFilesOptions
from flowserver.repositories.client_repository import ClientRepository
from flowserver.repositories.file_repository import FileRepository
from flowserver.schemas.records import FileRecord
from flowserver.utils import paginate
from kvstore.engine import KeyValueEngine

logger = get_logger(__name__)


def is_visible(record: FileRecord, owner_id: str) -> bool:
    """
    Visibility rule for listings.

    An empty owner_id is the administrative view and sees everything;
    otherwise a caller sees its own records plus every public one.
    """
    if not owner_id:
        return True
    return record.owner_id == owner_id or record.is_public


def matches_search(record: FileRecord, search: str) -> bool:
    if not search:
        return True
    return search.lower() in record.original_name.lower()


class ListingService:
    """
    Answers listing queries by scanning every persona's file records.

    There is no index: each call dumps the application namespace once and
    filters in memory.
    """

    def __init__(
        self,
        engine: KeyValueEngine,
        file_repo: Optional[FileRepository] = None,
        client_repo: Optional[ClientRepository] = None,
    ):
        self.client_repo = client_repo or ClientRepository(engine)
        self.file_repo = file_repo or FileRepository(engine, client_repo=self.client_repo)

    def list_files(self, options: ListFilesOptions) -> FileListResponse:
        records, skipped = self.file_repo.scan()
        if skipped:
            logger.warning(f"Listing skipped {skipped} undecodable file records")

        matched = [
            record for record in records
            if is_visible(record, options.owner_id) and matches_search(record, options.search)
        ]

        self._resolve_owner_names(matched)

        # Newest first; equal upload times fall back to ID order
        matched.sort(key=lambda r: (-r.upload_time, r.id))

        total = len(matched)
        page = paginate(matched, options.limit, options.offset)

        logger.debug(
            f"Listed files [owner_id={options.owner_id or 'admin'}] [search={options.search!r}] "
            f"[returned={len(page)}] [total={total}]"
        )
        return FileListResponse(files=page, total=total, skipped=skipped)

    def list_all(self) -> List[FileRecord]:
        return self.list_files(ListFilesOptions()).files

    def list_by_owner(self, owner_id: str) -> List[FileRecord]:
        return self.list_files(ListFilesOptions(owner_id=owner_id)).files

    def _resolve_owner_names(self, records: List[FileRecord]) -> None:
        # Memo lives for this call only
        names: Dict[str, str] = {}
        for record in records:
            if record.owner_id not in names:
                names[record.owner_id] = self.client_repo.display_name(record.owner_id)
            record.owner_name = names[record.owner_id]
