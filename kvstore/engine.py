"""Persona-scoped key-value engine contract."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Tuple

SYSTEM_PERSONA = "_system"


@dataclass(frozen=True)
class UndecodableValue:
    """Placeholder returned by dumps for an entry whose stored value cannot be decoded."""
    raw: str


class KeyValueEngine(ABC):
    """
    Stores JSON-serializable values under (persona, app, key) triples.

    Implementations must provide atomic single-key operations, an atomic
    move between personas, a global reverse lookup from a bare key to the
    persona holding it, and a consistent per-application dump.
    """

    @abstractmethod
    def get(self, persona: str, app: str, key: str) -> Any:
        """
        Fetch one value.

        Raises:
            KeyNotFoundError: If the key is absent from the persona
            UndecodableValueError: If the stored value cannot be decoded
        """

    @abstractmethod
    def set(self, persona: str, app: str, key: str, value: Any) -> None:
        """Create or overwrite one value."""

    @abstractmethod
    def delete(self, persona: str, app: str, key: str) -> None:
        """Delete one value. Deleting an absent key is not an error."""

    @abstractmethod
    def move(self, old_persona: str, new_persona: str, app: str, key: str) -> None:
        """
        Atomically relocate one key from old_persona to new_persona.

        Raises:
            KeyNotFoundError: If the key is absent from old_persona
        """

    @abstractmethod
    def get_global(self, app: str, key: str) -> Tuple[Any, str]:
        """
        Find a key without knowing its persona.

        Returns:
            Tuple of (value, persona_id)

        Raises:
            KeyNotFoundError: If no persona holds the key
            UndecodableValueError: If the stored value cannot be decoded
        """

    @abstractmethod
    def dump_app(self, app: str) -> Dict[str, Dict[str, Any]]:
        """
        Snapshot every key of one application across all personas.

        Returns:
            Mapping persona_id -> key -> value
            (UndecodableValue for entries that cannot be decoded)
        """

    @abstractmethod
    def get_app_store(self, persona: str, app: str) -> Dict[str, Any]:
        """
        Snapshot every key of one application within one persona.

        Returns:
            Mapping key -> value (empty if the persona holds nothing)
            (UndecodableValue for entries that cannot be decoded)
        """
