"""Service locator for process-wide collaborators."""

import uuid
from typing import Optional

from flowserver.blob_storage import BlobStorage
from flowserver.exceptions import ConfigurationError
from kvstore.engine import KeyValueEngine

_engine: Optional[KeyValueEngine] = None
_blob_storage: Optional[BlobStorage] = None
_identity_namespace: Optional[uuid.UUID] = None


def set_engine(engine: Optional[KeyValueEngine]):
    """Set global key-value engine instance"""
    global _engine
    _engine = engine


def get_engine() -> KeyValueEngine:
    """Get global key-value engine instance"""
    if _engine is None:
        raise ConfigurationError("Key-value engine is not initialized")
    return _engine


def set_blob_storage(storage: Optional[BlobStorage]):
    """Set global blob storage instance"""
    global _blob_storage
    _blob_storage = storage


def get_blob_storage() -> BlobStorage:
    """Get global blob storage instance"""
    if _blob_storage is None:
        raise ConfigurationError("Blob storage is not initialized")
    return _blob_storage


def set_identity_namespace(namespace: Optional[uuid.UUID]):
    """Set global identity namespace"""
    global _identity_namespace
    _identity_namespace = namespace


def get_identity_namespace() -> uuid.UUID:
    """Get global identity namespace"""
    if _identity_namespace is None:
        raise ConfigurationError("Identity namespace is not initialized")
    return _identity_namespace
