"""Free-form per-persona values (kanban board, generic keys)."""

from typing import Any, Optional

from common.constants import APP_ID
from common.logging_config import get_logger
from common.types import is_reserved_key
from flowserver.exceptions import InvalidKeyError, MissingClientIdError
from flowserver.service_locator import get_engine
from kvstore.engine import KeyValueEngine
from kvstore.exceptions import KeyNotFoundError

logger = get_logger(__name__)


class StoreService:
    """
    Reads and writes opaque values in the caller's own persona.

    Keys in the file or client key space are refused so free-form values
    can never shadow records.
    """

    def __init__(self, engine: Optional[KeyValueEngine] = None):
        self.engine = engine or get_engine()

    def get_value(self, client_id: str, key: str) -> Optional[Any]:
        self._validate(client_id, key)
        try:
            return self.engine.get(client_id, APP_ID, key)
        except KeyNotFoundError:
            return None

    def set_value(self, client_id: str, key: str, value: Any) -> None:
        self._validate(client_id, key)
        self.engine.set(client_id, APP_ID, key, value)
        logger.debug(f"Stored value [client_id={client_id}] [key={key}]")

    @staticmethod
    def _validate(client_id: str, key: str) -> None:
        if not client_id:
            raise MissingClientIdError("X-Client-ID header is required")
        if not key:
            raise InvalidKeyError("key is required")
        if is_reserved_key(key):
            raise InvalidKeyError(f"Key {key!r} is reserved")
