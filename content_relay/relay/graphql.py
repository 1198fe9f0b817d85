"""GraphQL relay: forwards browser queries to the content backend with credentials.

The browser never sees the upstream credentials. Every call ends in a
``RelayOk`` carrying the upstream JSON and status, or a ``RelayErr`` from the
error taxonomy; exceptions do not escape ``forward``.

No retries are attempted. A failed upstream call is reported straight away;
``_send`` is the single place a bounded retry policy would go.
"""

import asyncio
import json
import logging
import math

import httpx
from pydantic import ValidationError

from content_relay.adapter.client.http import post_raw
from content_relay.config import Settings
from content_relay.errors import (
    ConfigurationError,
    InvalidRequestError,
    RelayError,
    UpstreamBlockedError,
    UpstreamFormatError,
    UpstreamTimeoutError,
)
from content_relay.relay.challenge import ChallengeDetector, SignatureChallengeDetector, is_json_content_type
from content_relay.relay.result import RelayErr, RelayOk, RelayResult
from content_relay.schemas import GraphQLRequest

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 500


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"JSON number out of range: {raw}")
    return value


def parse_upstream_json(text: str):
    # Strict JSON only: the response encoder rejects NaN and Infinity.
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def body_preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def parse_graphql_request(raw_body: bytes) -> GraphQLRequest:
    try:
        payload = json.loads(raw_body)
    except ValueError as exc:
        raise InvalidRequestError(message="Body must be a JSON object") from exc

    if not isinstance(payload, dict):
        raise InvalidRequestError(message="Body must be a JSON object")

    try:
        return GraphQLRequest.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) or "body" for err in exc.errors())
        raise InvalidRequestError(message=f"Expected {{query, variables}}; invalid fields: {fields}") from exc


class GraphQLRelay:
    def __init__(
        self,
        settings: Settings,
        detector: ChallengeDetector | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.detector = detector or SignatureChallengeDetector()
        self.transport = transport

    def log_configuration(self) -> None:
        presence = {
            name: "MISSING" if name in self.settings.missing_graphql_settings() else "present"
            for name in ("graphql_url", "graphql_username", "graphql_password")
        }
        logger.info(
            "graphql relay configuration: url=%s username=%s password=%s",
            presence["graphql_url"],
            presence["graphql_username"],
            presence["graphql_password"],
        )

    async def forward(self, raw_body: bytes) -> RelayResult:
        try:
            return await self._forward(raw_body)
        except RelayError as err:
            return RelayErr(err)

    async def _forward(self, raw_body: bytes) -> RelayOk:
        missing = self.settings.missing_graphql_settings()
        if missing:
            logger.error("graphql relay cannot proxy, missing settings: %s", ", ".join(missing))
            raise ConfigurationError()

        request = parse_graphql_request(raw_body)
        logger.debug("forwarding graphql operation %s", request.operation_name or "<anonymous>")

        response = await self._send(raw_body)
        return self._classify(response)

    async def _send(self, content: bytes) -> httpx.Response:
        credential = self.settings.graphql_credential
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": credential.basic_auth_header(),
            "Cache-Control": "no-store",
            "Pragma": "no-cache",
        }
        timeout_s = self.settings.graphql_timeout_s
        try:
            # wait_for bounds total wall time; the httpx timeout only bounds each phase.
            return await asyncio.wait_for(
                post_raw(self.settings.graphql_url, content, headers, timeout_s, self.transport),
                timeout=timeout_s,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            logger.error("graphql upstream timed out after %ss", timeout_s)
            raise UpstreamTimeoutError(message=f"No response from upstream within {timeout_s:g}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("graphql upstream request failed: %s", exc.__class__.__name__)
            raise RelayError(message="Could not reach the content backend") from exc

    def _classify(self, response: httpx.Response) -> RelayOk:
        text = response.text
        content_type = response.headers.get("content-type")

        rule = self.detector.detect(text, content_type)
        if rule is not None:
            logger.warning(
                "graphql upstream answered with a challenge page",
                extra={"rule": rule, "upstream_status": response.status_code},
            )
            raise UpstreamBlockedError(
                message="The content backend answered with a bot-protection challenge instead of data",
            )

        if is_json_content_type(content_type):
            try:
                payload = parse_upstream_json(text)
            except ValueError as exc:
                logger.error("graphql upstream sent malformed JSON", extra={"upstream_status": response.status_code})
                raise UpstreamFormatError(message="Upstream returned malformed JSON", details=body_preview(text)) from exc
            return RelayOk(body=payload, status_code=response.status_code)

        logger.error(
            "graphql upstream sent a non-JSON response (%s)",
            content_type or "no content-type",
            extra={"upstream_status": response.status_code},
        )
        raise UpstreamFormatError(message="Upstream returned a non-JSON response", details=body_preview(text))
