"""Entry point for the Flow server."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from flowserver import config
from flowserver.blob_storage import BlobStorage
from flowserver.exceptions import (
    AdminRequiredError,
    ClientNotFoundError,
    ConfigurationError,
    FileRecordNotFoundError,
    FlowException,
    InvalidAdminSecretError,
    InvalidKeyError,
    MissingClientIdError,
    SelfModificationError,
    StorageError,
    UnauthorizedAccessError,
)
from flowserver.identity import parse_namespace
from flowserver.routes import client_router, file_router, persona_router, store_router
from flowserver.schemas.common import ErrorResponse
from flowserver.service_locator import set_blob_storage, set_engine, set_identity_namespace
from kvstore.exceptions import EngineError
from kvstore.sqlite_engine import SQLiteEngine

logger = setup_logging('flowserver')
setup_logging('kvstore')

app = FastAPI(
    title="Flow Server",
    description="Persona-scoped file and client record store",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["POST", "OPTIONS", "GET", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    client_id = request.headers.get("X-Client-ID")

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}] [client_id={client_id or 'anonymous'}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Open the key-value engine and byte storage on application startup.
    """
    logger.info("Flow server starting up...")

    set_identity_namespace(parse_namespace(config.CELERIX_NAMESPACE))

    set_engine(SQLiteEngine(config.DATABASE_PATH))
    logger.info(f"Key-value engine initialized [db_path={config.DATABASE_PATH}]")

    blob_storage = BlobStorage(config.STORAGE_DIR)
    blob_storage.ensure_directory()
    set_blob_storage(blob_storage)
    logger.info(f"Blob storage initialized [storage_dir={config.STORAGE_DIR}]")

    if not config.ADMIN_SECRET:
        logger.warning("ADMIN_SECRET is not set; admin activation is disabled")


def _error_response(
    request: Request,
    exc: Exception,
    status_code: int,
    code: str,
    description: str,
) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    if status_code >= 500:
        logger.error(
            f"{description}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
    else:
        logger.warning(
            f"{description}: {exc} [request_id={request_id}] path={request.url.path}"
        )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), code=code).model_dump()
    )


@app.exception_handler(ClientNotFoundError)
async def client_not_found_handler(request: Request, exc: ClientNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "CLIENT_NOT_FOUND", "Client not found error")


@app.exception_handler(FileRecordNotFoundError)
async def file_not_found_handler(request: Request, exc: FileRecordNotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND", "File not found error")


@app.exception_handler(UnauthorizedAccessError)
async def unauthorized_access_handler(request: Request, exc: UnauthorizedAccessError):
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "UNAUTHORIZED_ACCESS", "Unauthorized access error")


@app.exception_handler(AdminRequiredError)
async def admin_required_handler(request: Request, exc: AdminRequiredError):
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "ADMIN_REQUIRED", "Admin required error")


@app.exception_handler(InvalidAdminSecretError)
async def invalid_admin_secret_handler(request: Request, exc: InvalidAdminSecretError):
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "INVALID_ADMIN_SECRET", "Invalid admin secret error")


@app.exception_handler(MissingClientIdError)
async def missing_client_id_handler(request: Request, exc: MissingClientIdError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "MISSING_CLIENT_ID", "Missing client ID error")


@app.exception_handler(SelfModificationError)
async def self_modification_handler(request: Request, exc: SelfModificationError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "SELF_MODIFICATION", "Self modification error")


@app.exception_handler(InvalidKeyError)
async def invalid_key_handler(request: Request, exc: InvalidKeyError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "INVALID_KEY", "Invalid key error")


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "STORAGE_ERROR", "Storage error")


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "CONFIGURATION_ERROR", "Configuration error")


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "ENGINE_ERROR", "Engine error")


@app.exception_handler(FlowException)
async def flow_exception_handler(request: Request, exc: FlowException):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Flow exception")


app.include_router(persona_router)
app.include_router(file_router)
app.include_router(client_router)
app.include_router(store_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for container healthchecks.
    """
    return {"status": "healthy", "service": "flowserver"}


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "flowserver.main:app",
        host=config.FLOW_HOST,
        port=config.FLOW_PORT,
        reload=config.FLOW_ENV == "dev"
    )


if __name__ == "__main__":
    main()
