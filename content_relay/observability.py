import json
import logging
import time
import uuid
from collections import Counter
from dataclasses import dataclass, field
from threading import Lock

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from content_relay.config import Settings
from content_relay.relay.result import RelayErr, RelayResult

# Extra record attributes the relay and access logs attach.
LOG_FIELDS = ("request_id", "method", "path", "status_code", "latency_ms", "upstream_status", "rule")


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key)) for key in LOG_FIELDS if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        JsonLogFormatter() if settings.log_json
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root.addHandler(handler)


def outcome_name(result: RelayResult) -> str:
    return type(result.error).__name__ if isinstance(result, RelayErr) else "ok"


@dataclass
class MetricsRegistry:
    """Per-app counters: HTTP responses by route and status, relay calls by outcome."""

    enabled: bool = True
    responses: Counter = field(default_factory=Counter)
    relay_outcomes: Counter = field(default_factory=Counter)
    _lock: Lock = field(default_factory=Lock)

    def record_response(self, path: str, status_code: int) -> None:
        if self.enabled:
            with self._lock:
                self.responses[(path, str(status_code))] += 1

    def record_outcome(self, relay: str, result: RelayResult) -> None:
        if self.enabled:
            with self._lock:
                self.relay_outcomes[(relay, outcome_name(result))] += 1

    def render_prometheus(self) -> str:
        with self._lock:
            lines = ["# TYPE relay_http_responses_total counter"]
            lines += [
                f'relay_http_responses_total{{path="{path}",status="{status}"}} {count}'
                for (path, status), count in sorted(self.responses.items())
            ]
            lines.append("# TYPE relay_upstream_outcomes_total counter")
            lines += [
                f'relay_upstream_outcomes_total{{relay="{relay}",outcome="{outcome}"}} {count}'
                for (relay, outcome), count in sorted(self.relay_outcomes.items())
            ]
            return "\n".join(lines) + "\n"


_access_logger = logging.getLogger("content_relay.access")


class RequestMetricsAndLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, registry: MetricsRegistry, tracked_paths: tuple[str, ...] = ()):
        super().__init__(app)
        self.registry = registry
        self.tracked_paths = frozenset(tracked_paths)

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        response: Response | None = None
        exc: Exception | None = None
        try:
            response = await call_next(request)
            return response
        except Exception as err:  # noqa: BLE001
            exc = err
            raise
        finally:
            latency_ms = (time.perf_counter() - start) * 1000.0
            status_code = response.status_code if response else 500
            # Untracked paths share one series so arbitrary URLs cannot grow the registry.
            path = request.url.path if request.url.path in self.tracked_paths else "other"
            self.registry.record_response(path, status_code)

            extra = {
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "latency_ms": round(latency_ms, 2),
            }
            if exc is not None:
                _access_logger.error("request_failed", exc_info=exc, extra=extra)
            else:
                _access_logger.info("request_complete", extra=extra)
                response.headers["x-request-id"] = request_id
