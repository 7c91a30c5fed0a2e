"""Health check endpoint and favicon short-circuit."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from stash.api.dependencies import get_credential_store, get_resource_store
from stash.infrastructure.persistence import CredentialStore, ResourceStore
from stash.schemas.health import HealthResponse

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
def health_check(
    resources: Annotated[ResourceStore, Depends(get_resource_store)],
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
) -> HealthResponse:
    """Return ok status and table sizes for liveness checks."""
    return HealthResponse(resources=len(resources), users=len(credentials))


@router.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    return Response(status_code=204)
