"""Health check used by the hosting platform."""

from fastapi import APIRouter, Depends

from directory_proxy.app.core.dependencies import Services, get_services
from directory_proxy.app.schemas.category import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def health(services: Services = Depends(get_services)) -> HealthStatus:
    return HealthStatus(
        ok=True,
        groups=len(services.group_store),
        media_cache_entries=len(services.media_cache),
    )
