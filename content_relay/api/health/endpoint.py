from fastapi import APIRouter, Depends

from content_relay.api.health.schema.response import HealthResponse
from content_relay.config import Settings
from content_relay.dependencies import get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        service="content-relay",
        graphql_configured=settings.graphql_configured,
        image_allowed_hosts=sorted(settings.image_allowed_hosts),
    )
