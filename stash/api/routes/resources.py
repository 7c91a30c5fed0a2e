"""Delivery API: raw bytes or bot embed, thumbnail, and oEmbed per resource id."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response, StreamingResponse

from stash.api.dependencies import get_delivery_service
from stash.application.use_cases import DeliveryService
from stash.domain.entities.resource import Resource
from stash.schemas.resource import OEmbedResponse
from stash.shared.utils.user_agents import is_bot

router = APIRouter()


async def _raw_response(
    delivery: DeliveryService, resource: Resource, request: Request
) -> Response:
    stream = await delivery.open_stream(resource, request.headers.get("range"))
    if stream.body is None:
        return Response(status_code=stream.status_code, headers=stream.headers)
    return StreamingResponse(
        stream.body,
        status_code=stream.status_code,
        media_type=stream.media_type,
        headers=stream.headers,
    )


@router.get("/{resource_id}/thumbnail")
async def get_thumbnail(
    resource_id: str,
    delivery: Annotated[DeliveryService, Depends(get_delivery_service)],
) -> Response:
    """JPEG thumbnail; 404 when none was generated."""
    resource = delivery.resolve(resource_id)
    content = await delivery.read_thumbnail(resource)
    return Response(content=content, media_type="image/jpeg")


@router.get(
    "/{resource_id}/oembed.json",
    response_model=OEmbedResponse,
    response_model_exclude_none=True,
)
async def get_oembed(
    resource_id: str,
    delivery: Annotated[DeliveryService, Depends(get_delivery_service)],
):
    """oEmbed metadata for clickable author/provider links."""
    resource = delivery.resolve(resource_id)
    return OEmbedResponse(**delivery.oembed(resource))


@router.get("/{resource_id}/direct")
async def get_resource_direct(
    resource_id: str,
    request: Request,
    delivery: Annotated[DeliveryService, Depends(get_delivery_service)],
) -> Response:
    """Raw bytes regardless of user agent (embed media URLs point here)."""
    resource = delivery.resolve(resource_id)
    return await _raw_response(delivery, resource, request)


@router.get("/{resource_id}")
async def get_resource(
    resource_id: str,
    request: Request,
    delivery: Annotated[DeliveryService, Depends(get_delivery_service)],
) -> Response:
    """Embed document for crawlers, raw bytes for everyone else."""
    resource = delivery.resolve(resource_id)
    if is_bot(request.headers.get("user-agent")):
        return HTMLResponse(delivery.embed(resource))
    return await _raw_response(delivery, resource, request)
