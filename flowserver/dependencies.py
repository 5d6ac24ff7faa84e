"""FastAPI dependencies identifying the caller."""

from dataclasses import dataclass

from fastapi import Depends, Header

from flowserver.exceptions import AdminRequiredError, MissingClientIdError
from flowserver.repositories.client_repository import ClientRepository
from flowserver.service_locator import get_engine


@dataclass(frozen=True)
class Caller:
    client_id: str
    is_admin: bool


def get_caller(x_client_id: str = Header(default="")) -> Caller:
    """
    Identify the caller from the X-Client-ID header.

    Anonymous callers get an empty client ID. The admin flag is read fresh
    from the client record on every request.
    """
    is_admin = ClientRepository(get_engine()).is_admin(x_client_id)
    return Caller(client_id=x_client_id, is_admin=is_admin)


def require_client(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.client_id:
        raise MissingClientIdError("X-Client-ID header is required")
    return caller


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_admin:
        raise AdminRequiredError("Admin access required")
    return caller
