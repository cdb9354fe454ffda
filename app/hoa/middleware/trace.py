import time
import uuid
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.hoa.core.logging import log_json

logger = logging.getLogger(__name__)


class TraceIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get("X-Trace-ID") or str(uuid.uuid4())
        request.state.trace_id = trace_id
        started = time.perf_counter()
        response: Response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        log_json(
            logger,
            {
                "event": "request",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "latency_ms": int((time.perf_counter() - started) * 1000),
                "trace_id": trace_id,
            },
        )
        return response
