# app/api/routes/health.py
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.db.session import engine

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Response schema for the health check endpoint.
    """

    status: str = Field(..., examples=["ok"])
    app_name: str = Field(..., examples=["StandupBot"])
    environment: str = Field(
        ...,
        description="Deployment environment (local/test/dev/stage/prod).",
        examples=["local"],
    )
    database_backend: str = Field(
        ...,
        description="SQLAlchemy dialect the service is configured for; no query is issued.",
        examples=["sqlite"],
    )
    timestamp_utc: datetime = Field(..., examples=["2026-01-28T09:15:00Z"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe for the StandupBot service",
    description=(
        "Cheap endpoint for container probes and uptime checks. It reports "
        "configuration only and never touches the database, so it stays green "
        "while the store is degraded."
    ),
)
async def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        database_backend=engine.dialect.name,
        timestamp_utc=datetime.now(tz=timezone.utc),
    )
