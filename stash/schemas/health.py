"""Health check schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness response with table sizes."""

    status: str = "ok"
    resources: int = 0
    users: int = 0
