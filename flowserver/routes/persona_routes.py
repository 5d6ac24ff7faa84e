"""Persona API routes."""

from fastapi import APIRouter, Depends, Header

from flowserver import config
from flowserver.dependencies import Caller, require_client
from flowserver.schemas.common import StatusResponse
from flowserver.schemas.persona import (
    ActivateAdminRequest,
    PersonaResponse,
    RecoverRequest,
    RecoverResponse,
    UpdateNameRequest,
    UpdateNameResponse,
)
from flowserver.services.persona_service import PersonaService, persona_label
from flowserver.utils import load_version_document

router = APIRouter(prefix="/api", tags=["Persona"])


@router.get("/version")
def get_version():
    """
    Return the version document.
    """
    return load_version_document(config.VERSION_FILE)


@router.get("/persona", response_model=PersonaResponse)
def get_persona(x_client_id: str = Header(default="")):
    """
    Describe the calling persona and record its activity.

    Unknown or anonymous callers get an empty client persona.
    """
    persona_service = PersonaService()
    client = persona_service.get_active_client(x_client_id)
    version = str(load_version_document(config.VERSION_FILE).get("version", "unknown"))

    if client is None:
        return PersonaResponse(persona=persona_label(False), name="", recovery_code="", version=version)

    return PersonaResponse(
        persona=persona_label(client.is_admin),
        name=client.name,
        recovery_code=client.recovery_code,
        version=version,
    )


@router.post("/persona/name", response_model=UpdateNameResponse)
def update_client_name(request: UpdateNameRequest, caller: Caller = Depends(require_client)):
    """
    Name the calling client, registering it on first use.

    Returns:
        - id: Client ID derived from the recovery code
        - recovery_code: Code that recovers this persona elsewhere
    """
    persona_service = PersonaService()
    client = persona_service.set_name(caller.client_id, request.name)
    return UpdateNameResponse(id=client.id, recovery_code=client.recovery_code)


@router.post("/persona/recover", response_model=RecoverResponse)
def recover_persona(request: RecoverRequest):
    """
    Recover a persona from its recovery code.

    Raises:
        - 404: Invalid recovery code
    """
    persona_service = PersonaService()
    client, client_id = persona_service.recover(request.code)
    return RecoverResponse(persona=persona_label(client.is_admin), id=client_id, name=client.name)


@router.post("/persona/admin", response_model=StatusResponse)
def activate_admin(request: ActivateAdminRequest, caller: Caller = Depends(require_client)):
    """
    Flag the calling client as admin when it presents the admin secret.

    Raises:
        - 403: Invalid or unconfigured admin secret
        - 404: Calling client does not exist
    """
    persona_service = PersonaService()
    persona_service.activate_admin(caller.client_id, request.secret)
    return StatusResponse()
