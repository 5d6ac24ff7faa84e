"""Maps a record's owner to the persona namespace that stores it."""

from typing import Union

from common.types import Owner
from kvstore.engine import SYSTEM_PERSONA


def resolve_persona(owner: Union[Owner, str]) -> str:
    """
    Return the persona that holds records of the given owner.

    Args:
        owner: An Owner, or a wire owner ID where "" means system-owned

    Returns:
        The owner's client ID, or SYSTEM_PERSONA for unowned records
    """
    if isinstance(owner, str):
        owner = Owner.from_id(owner)
    if owner.is_system:
        return SYSTEM_PERSONA
    return owner.client_id
