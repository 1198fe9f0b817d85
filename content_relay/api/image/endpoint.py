from fastapi import APIRouter, Depends, Query, Response

from content_relay.api.responses import error_response
from content_relay.dependencies import get_image_relay, get_metrics
from content_relay.observability import MetricsRegistry
from content_relay.relay.image import ImageRelay
from content_relay.relay.result import RelayErr
from content_relay.security.cors import IMAGE_CORS_POLICY

IMAGE_CACHE_CONTROL = "public, max-age=31536000, immutable"

# Mounted under settings.image_proxy_path by the app factory.
router = APIRouter(tags=["image"])


@router.get("")
async def image_proxy(
    url: str | None = Query(default=None),
    relay: ImageRelay = Depends(get_image_relay),
    metrics: MetricsRegistry = Depends(get_metrics),
) -> Response:
    result = await relay.fetch(url)
    metrics.record_outcome("image", result)
    if isinstance(result, RelayErr):
        return error_response(result)

    return Response(
        content=result.body,
        media_type=result.media_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL, **IMAGE_CORS_POLICY},
    )
