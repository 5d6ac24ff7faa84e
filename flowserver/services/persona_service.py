"""Persona service: naming, recovery and admin activation of clients."""

import hmac
import uuid
from typing import Optional, Tuple

from common.logging_config import get_logger
from flowserver import config
from flowserver.exceptions import ClientNotFoundError, InvalidAdminSecretError, MissingClientIdError
from flowserver.identity import derive_client_id, generate_recovery_code
from flowserver.repositories.client_repository import ClientRepository
from flowserver.schemas.records import ClientRecord
from flowserver.service_locator import get_engine, get_identity_namespace
from flowserver.utils import current_unix_time
from kvstore.engine import KeyValueEngine

logger = get_logger(__name__)


def persona_label(is_admin: bool) -> str:
    return "admin" if is_admin else "client"


class PersonaService:
    def __init__(
        self,
        engine: Optional[KeyValueEngine] = None,
        namespace: Optional[uuid.UUID] = None,
        admin_secret: Optional[str] = None,
    ):
        self.engine = engine or get_engine()
        self.client_repo = ClientRepository(self.engine)
        self._namespace = namespace
        self.admin_secret = config.ADMIN_SECRET if admin_secret is None else admin_secret

    @property
    def namespace(self) -> uuid.UUID:
        return self._namespace or get_identity_namespace()

    def get_active_client(self, client_id: str) -> Optional[ClientRecord]:
        """
        Fetch the calling client and record its activity.

        Returns:
            The client record, or None for anonymous or unknown callers
        """
        if not client_id:
            return None
        try:
            client = self.client_repo.get(client_id)
        except ClientNotFoundError:
            logger.debug(f"Unknown client [client_id={client_id}]")
            return None

        now = current_unix_time()
        try:
            self.client_repo.update_last_active(client_id, now)
        except ClientNotFoundError:
            logger.debug(f"Client vanished before activity update [client_id={client_id}]")
            return client
        client.last_active = now
        return client

    def set_name(self, client_id: str, name: str) -> ClientRecord:
        """
        Name the calling client, registering it on first use.

        The caller keeps its recovery code if it has one; otherwise a new
        code is generated. The stored client ID is always derived from the code.
        """
        recovery_code = ""
        if client_id:
            try:
                recovery_code = self.client_repo.get(client_id).recovery_code
            except ClientNotFoundError:
                pass
        if not recovery_code:
            recovery_code = generate_recovery_code()
            logger.info("Generated recovery code for new client")

        derived_id = derive_client_id(self.namespace, recovery_code)
        return self.client_repo.upsert(derived_id, name, recovery_code, current_unix_time())

    def recover(self, recovery_code: str) -> Tuple[ClientRecord, str]:
        """
        Look up a client from its recovery code.

        Returns:
            Tuple of (client record, client ID derived from the code)

        Raises:
            ClientNotFoundError: If no client holds the code
        """
        client = self.client_repo.find_by_recovery_code(recovery_code)
        derived_id = derive_client_id(self.namespace, client.recovery_code)
        if derived_id != client.id:
            logger.warning(f"Recovered client ID differs from derived ID [client_id={client.id}]")
        return client, derived_id

    def activate_admin(self, client_id: str, secret: str) -> None:
        if not client_id:
            raise MissingClientIdError("X-Client-ID header is required")
        if not self.admin_secret or not hmac.compare_digest(secret.encode(), self.admin_secret.encode()):
            logger.warning(f"Admin activation refused [client_id={client_id}]")
            raise InvalidAdminSecretError("Invalid admin secret")

        self.client_repo.update_admin_status(client_id, True)
        logger.info(f"Admin activated [client_id={client_id}]")
