"""Per-persona value storage routes (kanban board and generic keys)."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from common.constants import KANBAN_KEY
from flowserver.dependencies import Caller, require_client
from flowserver.schemas.common import StatusResponse
from flowserver.services.store_service import StoreService

router = APIRouter(prefix="/api", tags=["Store"])


@router.get("/kanban")
def get_kanban(caller: Caller = Depends(require_client)):
    """
    Return the caller's kanban board, or an empty board.
    """
    value = StoreService().get_value(caller.client_id, KANBAN_KEY)
    if value is None:
        return {"columns": []}
    return value


@router.post("/kanban", response_model=StatusResponse)
def save_kanban(value: Any = Body(...), caller: Caller = Depends(require_client)):
    """
    Replace the caller's kanban board.
    """
    StoreService().set_value(caller.client_id, KANBAN_KEY, value)
    return StatusResponse()


@router.get("/store/{key}")
def get_value(key: str, caller: Caller = Depends(require_client)):
    """
    Return the caller's value under key, or null.

    Raises:
        - 400: Reserved key
    """
    return StoreService().get_value(caller.client_id, key)


@router.post("/store/{key}", response_model=StatusResponse)
def save_value(key: str, value: Any = Body(...), caller: Caller = Depends(require_client)):
    """
    Store an arbitrary JSON value under key in the caller's persona.

    Raises:
        - 400: Reserved key
    """
    StoreService().set_value(caller.client_id, key, value)
    return StatusResponse()
