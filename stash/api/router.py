"""Router aggregation.

Fixed paths (health, favicon, delete, upload) are included before the
catch-all /{resource_id} routes so they take precedence.
"""

from fastapi import APIRouter

from stash.api.routes import deletion, health, resources, uploads

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(deletion.router, tags=["deletion"])
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(resources.router, tags=["resources"])
