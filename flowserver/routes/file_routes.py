"""File operation API routes."""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse

from common.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from common.logging_config import get_logger
from flowserver.dependencies import Caller, get_caller, require_client
from flowserver.schemas.common import StatusResponse
from flowserver.schemas.files import ListFilesResponse, UpdateFileRequest
from flowserver.schemas.records import FileRecord
from flowserver.services.file_service import FileService

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


@router.post("/upload", response_model=FileRecord)
def upload_file(
    file: UploadFile = File(...),
    is_public: str = Form("false"),
    caller: Caller = Depends(require_client),
):
    """
    Upload a file owned by the caller.

    Parameters:
        - file: File to upload (multipart/form-data)
        - is_public: "true" to make the file visible to every client
        - X-Client-ID header (required)

    Returns:
        - The stored file record

    Raises:
        - 400: Missing X-Client-ID
        - 500: Storage or engine failure
    """
    file_service = FileService()
    return file_service.upload_file(
        file_data=file.file,
        file_name=file.filename or "",
        owner_id=caller.client_id,
        is_public=is_public == "true",
    )


@router.get("/files", response_model=ListFilesResponse)
def list_files(
    search: str = Query(""),
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_PAGE_LIMIT),
    caller: Caller = Depends(get_caller),
):
    """
    List files visible to the caller, newest first.

    Admins see every file; other clients see their own files plus public ones.
    page/limit values below 1 fall back to 1 and 8.

    Raises:
        - 400: Missing X-Client-ID for a non-admin caller
    """
    logger.debug(
        f"ListFiles request: is_admin={caller.is_admin}, client_id={caller.client_id}, "
        f"search={search}, page={page}, limit={limit}"
    )
    file_service = FileService()
    response = file_service.list_files(
        client_id=caller.client_id,
        is_admin=caller.is_admin,
        search=search,
        page=page,
        limit=limit,
    )
    return ListFilesResponse(files=response.files, total=response.total)


@router.get("/files/{file_id}", response_model=FileRecord)
def get_file_metadata(file_id: str):
    """
    Fetch one file record with its resolved owner name.

    Raises:
        - 404: File not found
    """
    file_service = FileService()
    return file_service.get_file(file_id)


@router.put("/files/{file_id}", response_model=StatusResponse)
def update_file(
    file_id: str,
    request: UpdateFileRequest,
    caller: Caller = Depends(get_caller),
):
    """
    Rename a file, toggle its visibility, or (admins only) change its owner.

    Raises:
        - 403: Caller is neither the owner nor an admin
        - 404: File not found
    """
    file_service = FileService()
    file_service.update_file(
        file_id=file_id,
        client_id=caller.client_id,
        is_admin=caller.is_admin,
        name=request.original_name,
        owner_id=request.owner_id,
        is_public=request.is_public,
    )
    return StatusResponse()


@router.delete("/files/{file_id}", response_model=StatusResponse)
def delete_file(file_id: str, caller: Caller = Depends(get_caller)):
    """
    Delete a file record and its stored payload.

    Raises:
        - 403: Caller is neither the owner nor an admin
        - 404: File not found
    """
    file_service = FileService()
    file_service.delete_file(file_id, client_id=caller.client_id, is_admin=caller.is_admin)
    return StatusResponse()


@router.get("/download/{id_or_link}")
def download_file(id_or_link: str):
    """
    Download a file by its ID or its public download link.

    Raises:
        - 404: No file matches
        - 500: Stored payload is missing
    """
    file_service = FileService()
    record, path = file_service.resolve_download(id_or_link)
    return FileResponse(path, filename=record.original_name)
