"""Client repository: client records anchored in the system persona."""

from typing import Any, List

from pydantic import ValidationError

from common.constants import APP_ID, SYSTEM_OWNER_NAME, UNKNOWN_OWNER_NAME
from common.logging_config import get_logger
from common.types import ClientKey
from flowserver.exceptions import ClientNotFoundError
from flowserver.schemas.records import ClientRecord
from kvstore.engine import KeyValueEngine, SYSTEM_PERSONA, UndecodableValue
from kvstore.exceptions import KeyNotFoundError, UndecodableValueError

logger = get_logger(__name__)


class ClientRepository:
    def __init__(self, engine: KeyValueEngine):
        self.engine = engine

    def get(self, client_id: str) -> ClientRecord:
        logger.debug(f"Fetching client [client_id={client_id}]")
        try:
            value = self.engine.get(SYSTEM_PERSONA, APP_ID, str(ClientKey(client_id)))
        except KeyNotFoundError:
            raise ClientNotFoundError(f"Client {client_id} not found")
        except UndecodableValueError:
            logger.warning(f"Stored client is undecodable [client_id={client_id}]")
            raise ClientNotFoundError(f"Client {client_id} not found")

        client = self._decode(value)
        if client is None:
            logger.warning(f"Stored client is undecodable [client_id={client_id}]")
            raise ClientNotFoundError(f"Client {client_id} not found")
        return client

    def upsert(self, client_id: str, name: str, recovery_code: str, last_active: int) -> ClientRecord:
        """
        Create a client, or overwrite name, recovery code and last activity
        of an existing one while keeping its admin flag.
        """
        try:
            client = self.get(client_id)
        except ClientNotFoundError:
            client = ClientRecord(
                id=client_id,
                name=name,
                recovery_code=recovery_code,
                last_active=last_active,
                is_admin=False,
            )
            logger.info(f"Creating client [client_id={client_id}]")
        else:
            client.name = name
            client.recovery_code = recovery_code
            client.last_active = last_active
            logger.info(f"Updating client [client_id={client_id}]")

        self._put(client)
        return client

    def update_last_active(self, client_id: str, last_active: int) -> None:
        client = self.get(client_id)
        client.last_active = last_active
        self._put(client)

    def update_admin_status(self, client_id: str, is_admin: bool) -> None:
        client = self.get(client_id)
        client.is_admin = is_admin
        self._put(client)
        logger.info(f"Admin status changed [client_id={client_id}] [is_admin={is_admin}]")

    def update_full(self, client_id: str, name: str, recovery_code: str, is_admin: bool) -> None:
        client = self.get(client_id)
        client.name = name
        client.recovery_code = recovery_code
        client.is_admin = is_admin
        self._put(client)
        logger.info(f"Client updated [client_id={client_id}] [is_admin={is_admin}]")

    def delete(self, client_id: str) -> None:
        self.engine.delete(SYSTEM_PERSONA, APP_ID, str(ClientKey(client_id)))
        logger.info(f"Client deleted [client_id={client_id}]")

    def find_by_recovery_code(self, recovery_code: str) -> ClientRecord:
        logger.debug("Looking up client by recovery code")
        for client in self._scan():
            if client.recovery_code == recovery_code:
                return client
        raise ClientNotFoundError("Invalid recovery code")

    def list(self) -> List[ClientRecord]:
        clients = list(self._scan())
        # sorted() is stable: equal names keep scan order
        return sorted(clients, key=lambda c: c.name)

    def is_admin(self, client_id: str) -> bool:
        if not client_id:
            return False
        try:
            return self.get(client_id).is_admin
        except ClientNotFoundError:
            return False

    def display_name(self, owner_id: str) -> str:
        """
        Resolve the owner name shown next to a file record.

        Args:
            owner_id: Wire owner ID ("" for system-owned)

        Returns:
            The client's name, "Unknown" for a missing client, "Admin" for system-owned
        """
        if not owner_id:
            return SYSTEM_OWNER_NAME
        try:
            return self.get(owner_id).name
        except ClientNotFoundError:
            return UNKNOWN_OWNER_NAME

    def _scan(self):
        store = self.engine.get_app_store(SYSTEM_PERSONA, APP_ID)
        skipped = 0
        for raw_key, value in store.items():
            if ClientKey.parse(raw_key) is None:
                continue
            client = self._decode(value)
            if client is None:
                skipped += 1
                continue
            yield client
        if skipped:
            logger.warning(f"Skipped {skipped} undecodable client records")

    def _put(self, client: ClientRecord) -> None:
        self.engine.set(SYSTEM_PERSONA, APP_ID, str(ClientKey(client.id)), client.to_storage())

    @staticmethod
    def _decode(value: Any):
        if isinstance(value, UndecodableValue):
            return None
        try:
            return ClientRecord.model_validate(value)
        except ValidationError:
            return None
