"""Deletion API: GET /delete/{filename}, the link handed out at upload time."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from stash.api.dependencies import get_deletion_service
from stash.application.use_cases import DeletionService

router = APIRouter()


@router.get("/delete/{filename}", response_class=PlainTextResponse)
async def delete_resource(
    filename: str,
    deletion: Annotated[DeletionService, Depends(get_deletion_service)],
) -> PlainTextResponse:
    """Delete the resource stored as filename; 400 if no resource owns it."""
    await deletion.delete_by_filename(filename)
    return PlainTextResponse("File has been deleted!")
