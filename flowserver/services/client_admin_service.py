"""Client administration service (admin-only operations on clients)."""

from typing import List, Optional

from common.logging_config import get_logger
from flowserver.exceptions import SelfModificationError
from flowserver.repositories.client_repository import ClientRepository
from flowserver.schemas.records import ClientRecord
from flowserver.service_locator import get_engine
from kvstore.engine import KeyValueEngine

logger = get_logger(__name__)


class ClientAdminService:
    def __init__(self, engine: Optional[KeyValueEngine] = None):
        self.engine = engine or get_engine()
        self.client_repo = ClientRepository(self.engine)

    def list_clients(self) -> List[ClientRecord]:
        return self.client_repo.list()

    def update_client(
        self,
        client_id: str,
        acting_admin_id: str,
        name: str,
        recovery_code: str,
        is_admin: bool,
    ) -> None:
        if client_id == acting_admin_id and not is_admin:
            raise SelfModificationError("Cannot remove admin status from yourself")
        self.client_repo.update_full(client_id, name, recovery_code, is_admin)

    def delete_client(self, client_id: str, acting_admin_id: str) -> None:
        if client_id == acting_admin_id:
            raise SelfModificationError("Cannot delete yourself")
        self.client_repo.delete(client_id)
        logger.info(f"Client removed by admin [client_id={client_id}] [admin_id={acting_admin_id}]")
