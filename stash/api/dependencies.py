"""Request dependencies: services and stores built at startup (see core.lifespan)."""

from fastapi import Request

from stash.application.use_cases import DeletionService, DeliveryService, UploadService
from stash.infrastructure.persistence import CredentialStore, ResourceStore


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_delivery_service(request: Request) -> DeliveryService:
    return request.app.state.delivery_service


def get_deletion_service(request: Request) -> DeletionService:
    return request.app.state.deletion_service


def get_resource_store(request: Request) -> ResourceStore:
    return request.app.state.resources


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials
