"""Client identity derivation from recovery codes."""

import uuid

from common.constants import RECOVERY_CODE_LENGTH
from flowserver.exceptions import ConfigurationError


def parse_namespace(value: str) -> uuid.UUID:
    """
    Parse the identity namespace from configuration.

    Args:
        value: UUID string (CELERIX_NAMESPACE)

    Returns:
        Parsed namespace UUID

    Raises:
        ConfigurationError: If value is empty or not a UUID
    """
    if not value:
        raise ConfigurationError("CELERIX_NAMESPACE environment variable is required")
    try:
        return uuid.UUID(value)
    except ValueError as e:
        raise ConfigurationError(f"Failed to parse CELERIX_NAMESPACE as UUID: {e}") from e


def derive_client_id(namespace: uuid.UUID, recovery_code: str) -> str:
    """
    Derive the stable client ID for a recovery code (UUIDv5, SHA-1 based).

    Args:
        namespace: Identity namespace UUID
        recovery_code: Client recovery code

    Returns:
        Client ID string
    """
    return str(uuid.uuid5(namespace, recovery_code))


def generate_recovery_code() -> str:
    """
    Generate a short upper-case recovery code.

    Returns:
        First RECOVERY_CODE_LENGTH hex characters of a UUID4, upper-cased
    """
    return str(uuid.uuid4())[:RECOVERY_CODE_LENGTH].upper()
