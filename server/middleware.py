"""Request id propagation."""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from utils.logger import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it on the response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info(
            f"{request.method} {request.url.path}",
            extra={"extra_fields": {"request_id": request_id}},
        )
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        log = logger.info if response.status_code < 400 else logger.error
        log(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={"extra_fields": {"request_id": request_id, "status": response.status_code}},
        )
        return response
