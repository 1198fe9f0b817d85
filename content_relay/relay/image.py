import logging
from urllib.parse import SplitResult, urlsplit, urlunsplit

import httpx

from content_relay.adapter.client.http import get_raw
from content_relay.config import Settings
from content_relay.errors import (
    ForbiddenOriginError,
    InvalidUrlError,
    MissingParameterError,
    RelayError,
    UpstreamFetchError,
)
from content_relay.relay.result import RelayErr, RelayOk, RelayResult
from content_relay.relay.urls import proxied_image_url

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0"
DEFAULT_IMAGE_TYPE = "image/jpeg"


def parse_target_url(raw_url: str | None) -> SplitResult:
    if not raw_url:
        raise MissingParameterError()

    try:
        parts = urlsplit(raw_url.strip())
        hostname = parts.hostname
        parts.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError as exc:
        raise InvalidUrlError() from exc

    if parts.scheme.lower() not in ("http", "https") or not hostname:
        raise InvalidUrlError()
    return parts


class ImageRelay:
    """Re-serves images from the TLS-less content host under the relay origin."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.transport = transport

    def resolve_upstream_url(self, raw_url: str | None) -> str:
        # Order matters: presence, then parse, then allow-list.
        parts = parse_target_url(raw_url)
        if parts.hostname.lower() not in self.settings.image_allowed_hosts:
            raise ForbiddenOriginError()
        return urlunsplit(parts._replace(scheme=self.settings.image_origin_scheme))

    async def _check_hop(self, request: httpx.Request) -> None:
        if request.url.host.lower() not in self.settings.image_allowed_hosts:
            logger.warning("image upstream redirected outside the allow-list to %s", request.url.host)
            raise ForbiddenOriginError()

    def public_url(self, original: str | None) -> str:
        return proxied_image_url(
            original,
            self.settings.image_allowed_hosts,
            proxy_path=self.settings.image_proxy_path,
            placeholder=self.settings.image_placeholder,
        )

    async def fetch(self, raw_url: str | None) -> RelayResult:
        try:
            return await self._fetch(raw_url)
        except RelayError as err:
            return RelayErr(err)

    async def _fetch(self, raw_url: str | None) -> RelayOk:
        upstream_url = self.resolve_upstream_url(raw_url)

        try:
            response = await get_raw(
                upstream_url,
                headers={"User-Agent": USER_AGENT},
                transport=self.transport,
                request_hooks=[self._check_hop],
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("image proxy error for %s: %s", upstream_url, exc.__class__.__name__)
            raise RelayError("Failed to fetch image") from exc

        if not response.is_success:
            logger.error("Failed to fetch image: %s", response.status_code, extra={"upstream_status": response.status_code})
            raise UpstreamFetchError(
                f"Failed to fetch image: {response.status_code}",
                status_code=response.status_code,
            )

        media_type = response.headers.get("content-type") or DEFAULT_IMAGE_TYPE
        return RelayOk(body=response.content, status_code=200, media_type=media_type)
