from datetime import datetime, timezone

from fastapi import APIRouter

from clinic_insights.config import get_settings
from clinic_insights.schemas.system import HealthRead

router = APIRouter(
    prefix="/api",
    tags=["system"],
)


@router.get("/health", response_model=HealthRead)
def health() -> HealthRead:
    """Liveness check: service name, version and environment."""
    s = get_settings()
    return HealthRead(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        service=s.service_name,
        version=s.app_version,
        environment=s.environment,
    )
