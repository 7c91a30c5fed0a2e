"""Upload API: ShareX-style POST / with x-ass-* option headers."""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, File, Request, UploadFile

from stash.api.dependencies import get_upload_service
from stash.application.dtos.upload import UploadRequest
from stash.application.use_cases import UploadService
from stash.core.config import Settings, get_settings
from stash.core.limiter import limit_upload
from stash.domain.entities.resource import OpenGraphOverrides
from stash.domain.enums import IdStrategy
from stash.infrastructure.external.notifications import WebhookTarget
from stash.schemas.resource import UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def bearer_token(authorization: str | None) -> str | None:
    """Return the token from an Authorization header ('Bearer <t>' or the bare token)."""
    if not authorization:
        return None
    value = authorization.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        return rest.strip() or None
    return value or None


def _int_header(raw: str | None, default: int) -> int:
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    return value if value >= 0 else default


@router.post("/", response_model=UploadResponse)
@limit_upload
async def upload_resource(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Annotated[Settings, Depends(get_settings)],
    upload_svc: Annotated[UploadService, Depends(get_upload_service)],
    file: UploadFile = File(...),
):
    """Store an uploaded file and return its resource, thumbnail and delete URLs.

    Notification and upload accounting run after the response is sent.
    """
    headers = request.headers
    requested = headers.get("x-ass-access")
    strategy = IdStrategy.parse(requested, settings.default_id_strategy)
    if requested and strategy.value != requested.strip().lower():
        logger.debug("Unknown x-ass-access %r, using %s", requested, strategy.value)
    upload = UploadRequest(
        file_data=file.file,
        original_name=file.filename or "upload",
        mime_type=file.content_type or "application/octet-stream",
        token=bearer_token(headers.get("authorization")),
        strategy=strategy,
        length=settings.resource_id_size,
        alt_length=_int_header(headers.get("x-ass-gfycat"), settings.gfy_id_size),
        opengraph=OpenGraphOverrides.from_headers(headers),
        domain=headers.get("x-ass-domain") or None,
        webhook=WebhookTarget.from_headers(
            headers,
            default_username=settings.default_webhook_username,
            default_avatar=settings.default_webhook_avatar,
        ),
    )
    result = await upload_svc.ingest(upload)
    background_tasks.add_task(upload_svc.notify_and_account, result)
    return UploadResponse(
        resource=result.resource_url,
        thumbnail=result.thumbnail_url,
        delete=result.delete_url,
    )
