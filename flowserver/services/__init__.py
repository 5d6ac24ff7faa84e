"""Service layer for business logic."""

from flowserver.services.client_admin_service import ClientAdminService
from flowserver.services.file_service import FileService
from flowserver.services.listing_service import ListingService
from flowserver.services.persona_service import PersonaService
from flowserver.services.store_service import StoreService

__all__ = [
    "ClientAdminService",
    "FileService",
    "ListingService",
    "PersonaService",
    "StoreService",
]
