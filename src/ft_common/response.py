"""The ``ApiResponse`` envelope every endpoint answers with.

    {"code": 0, "message": "success", "data": {...},
     "timestamp": "2024-03-05T10:00:00+00:00", "request_id": "req_..."}

``code`` is 0 on success, otherwise the AppError code; ``data`` is null on
error. ``request_id`` is the one RequestLogMiddleware put on request.state.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request

from src.ft_common.errors import AppError


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    request_id: str = Field(default_factory=new_request_id)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or new_request_id()


def respond(request: Request, data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(data=data, message=message, request_id=_request_id(request))


def error_payload(request: Request, err: AppError) -> dict[str, Any]:
    """JSON body for a failed request."""
    return ApiResponse(
        code=err.code, message=err.message, request_id=_request_id(request)
    ).model_dump()
