"""
Request ID middleware for FastAPI.

Takes the caller's X-Request-ID (or generates one), stores it on
request.state for the batch endpoint, echoes it in the response headers and
tags every log record of the request with it.
"""

import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from logaudit.core.logging_config import request_scope

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        with request_scope(request_id):
            logger.info(f"{request.method} {request.url.path} started")
            try:
                response: Response = await call_next(request)
            except Exception as e:
                logger.error(f"{request.method} {request.url.path} failed: {e}")
                raise

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code}"
            )
            return response
