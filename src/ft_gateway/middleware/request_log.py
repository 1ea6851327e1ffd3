"""Access log plus request correlation id.

Each request gets an id in ``request.state.request_id``; the ApiResponse
envelope and the ``X-Request-ID`` response header both carry it. An id sent
by an upstream proxy is reused when it looks sane.

    INFO [POST] /api/v1/transactions → 201 (23ms) req_a1b2c3d4e5f6
"""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.ft_common.response import new_request_id

logger = logging.getLogger("ft.request")

REQUEST_ID_HEADER = "X-Request-ID"
_INBOUND_ID = re.compile(r"^[A-Za-z0-9_\-]{8,64}$")
_QUIET_PATHS = frozenset({"/health"})


def request_id_for(request: Request) -> str:
    inbound = request.headers.get(REQUEST_ID_HEADER)
    if inbound and _INBOUND_ID.match(inbound):
        return inbound
    return new_request_id()


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request_id_for(request)
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        if response.status_code >= 500:
            level = logging.WARNING
        elif request.url.path in _QUIET_PATHS:
            level = logging.DEBUG
        else:
            level = logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
