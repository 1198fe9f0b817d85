from fastapi.responses import JSONResponse

from content_relay.relay.result import RelayErr
from content_relay.schemas import ErrorEnvelope


def error_response(result: RelayErr, headers: dict[str, str] | None = None) -> JSONResponse:
    err = result.error
    envelope = ErrorEnvelope(error=err.error, message=err.message, details=err.details)
    return JSONResponse(
        status_code=err.status_code,
        content=envelope.model_dump(exclude_none=True),
        headers=headers,
    )
