"""Shared pytest fixtures for all tests."""

import uuid

import pytest

from flowserver import service_locator
from flowserver.blob_storage import BlobStorage
from flowserver.repositories.client_repository import ClientRepository
from flowserver.repositories.file_repository import FileRepository
from flowserver.schemas.records import FileRecord
from flowserver.services.listing_service import ListingService
from kvstore.database import get_db_connection
from kvstore.sqlite_engine import SQLiteEngine


@pytest.fixture
def engine(tmp_path):
    """
    Create a key-value engine backed by a temporary SQLite file.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        SQLiteEngine instance
    """
    return SQLiteEngine(str(tmp_path / "store.db"))


@pytest.fixture
def insert_raw_value(engine):
    """
    Write a raw stored value straight into the engine table, bypassing encoding.

    Returns:
        Callable taking (persona, app, key, raw_text)
    """
    def _insert(persona, app, key, raw):
        with get_db_connection(engine.db_path) as conn:
            conn.execute(
                "INSERT INTO kv_entries (persona, app, key, value, updated_at) VALUES (?, ?, ?, ?, ?)",
                (persona, app, key, raw, "2024-01-01T00:00:00+00:00")
            )
            conn.commit()

    return _insert


@pytest.fixture
def blob_storage(tmp_path):
    """
    Create byte storage in a temporary uploads directory.
    """
    storage = BlobStorage(str(tmp_path / "uploads"))
    storage.ensure_directory()
    return storage


@pytest.fixture
def client_repo(engine):
    return ClientRepository(engine)


@pytest.fixture
def file_repo(engine, client_repo, blob_storage):
    return FileRepository(engine, client_repo=client_repo, blob_storage=blob_storage)


@pytest.fixture
def listing_service(engine, file_repo, client_repo):
    return ListingService(engine, file_repo=file_repo, client_repo=client_repo)


@pytest.fixture
def namespace():
    return uuid.UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8")


@pytest.fixture
def make_file_record(blob_storage):
    """
    Factory for file records with a real payload on disk.

    Returns:
        Callable building a FileRecord; keyword arguments override defaults
    """
    counter = {"n": 0}

    def _make(file_id=None, **overrides):
        counter["n"] += 1
        file_id = file_id or f"file-{counter['n']}"
        payload = (blob_storage.storage_dir / file_id)
        payload.write_bytes(b"payload " + file_id.encode())
        fields = dict(
            id=file_id,
            original_name=f"{file_id}.txt",
            stored_path=str(payload),
            size=payload.stat().st_size,
            upload_time=1_700_000_000 + counter["n"],
            owner_id="",
            download_link=f"link-{file_id}",
            is_public=False,
        )
        fields.update(overrides)
        return FileRecord(**fields)

    return _make


@pytest.fixture
def wired_services(engine, blob_storage, namespace):
    """
    Register the test engine, storage and namespace with the service locator.
    """
    service_locator.set_engine(engine)
    service_locator.set_blob_storage(blob_storage)
    service_locator.set_identity_namespace(namespace)
    yield
    service_locator.set_engine(None)
    service_locator.set_blob_storage(None)
    service_locator.set_identity_namespace(None)
