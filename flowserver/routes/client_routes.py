"""Client administration API routes (admin only)."""

from typing import List

from fastapi import APIRouter, Depends

from flowserver.dependencies import Caller, require_admin
from flowserver.schemas.clients import UpdateClientRequest
from flowserver.schemas.common import StatusResponse
from flowserver.schemas.records import ClientRecord
from flowserver.services.client_admin_service import ClientAdminService

router = APIRouter(prefix="/api/clients", tags=["Clients"])


@router.get("", response_model=List[ClientRecord])
def list_clients(caller: Caller = Depends(require_admin)):
    """
    List every client sorted by name.

    Raises:
        - 403: Admin access required
    """
    return ClientAdminService().list_clients()


@router.put("/{client_id}", response_model=StatusResponse)
def update_client(
    client_id: str,
    request: UpdateClientRequest,
    caller: Caller = Depends(require_admin),
):
    """
    Overwrite a client's name, recovery code and admin flag.

    Raises:
        - 400: Admin tried to drop its own admin flag
        - 403: Admin access required
        - 404: Client not found
    """
    ClientAdminService().update_client(
        client_id=client_id,
        acting_admin_id=caller.client_id,
        name=request.name,
        recovery_code=request.recovery_code,
        is_admin=request.is_admin,
    )
    return StatusResponse()


@router.delete("/{client_id}", response_model=StatusResponse)
def delete_client(client_id: str, caller: Caller = Depends(require_admin)):
    """
    Delete a client. Deleting an unknown client succeeds.

    Raises:
        - 400: Admin tried to delete itself
        - 403: Admin access required
    """
    ClientAdminService().delete_client(client_id, acting_admin_id=caller.client_id)
    return StatusResponse()
