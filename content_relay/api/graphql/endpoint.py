from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from content_relay.api.responses import error_response
from content_relay.dependencies import get_graphql_relay, get_metrics
from content_relay.observability import MetricsRegistry
from content_relay.relay.graphql import GraphQLRelay
from content_relay.relay.result import RelayErr
from content_relay.security.cors import graphql_cors_headers

router = APIRouter(prefix="/api/graphql", tags=["graphql"])


@router.options("/proxy")
async def graphql_preflight() -> Response:
    return Response(status_code=204, headers=graphql_cors_headers())


@router.post("/proxy")
async def graphql_proxy(
    request: Request,
    relay: GraphQLRelay = Depends(get_graphql_relay),
    metrics: MetricsRegistry = Depends(get_metrics),
) -> Response:
    # The body is validated by the relay so that malformed input still gets CORS headers.
    raw_body = await request.body()
    result = await relay.forward(raw_body)
    metrics.record_outcome("graphql", result)

    headers = {**graphql_cors_headers(), "Cache-Control": "no-store"}
    if isinstance(result, RelayErr):
        return error_response(result, headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=headers)
