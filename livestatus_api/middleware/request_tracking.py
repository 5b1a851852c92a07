"""Request tracking middleware for automatic request ID generation and propagation.

Every inbound HTTP request runs with a request ID in context. A well-formed
``X-Request-ID`` header supplied by the caller is reused; otherwise a new
ID is generated. The ID is echoed back in the response header and
included in every log line written while the request is served.
Unexpected exceptions are rendered as a generic 500 here, while the ID is
still set.
"""

import logging
import time
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from ..utils.request_context import (
    generate_request_id,
    reset_request_id,
    set_request_id,
    validate_request_id,
)

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


def install_request_tracking(app: FastAPI, log_requests: bool = True) -> None:
    """Add request ID tracking and access logging to a FastAPI app.

    Args:
        app: Application to instrument
        log_requests: Whether to log one line per completed request
    """

    @app.middleware("http")
    async def _track_request(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        supplied_id = request.headers.get(REQUEST_ID_HEADER)
        request_id = supplied_id if validate_request_id(supplied_id) else generate_request_id()

        token = set_request_id(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id
            if log_requests:
                logger.info(
                    f"{request.method} {request.url.path} "
                    f"-> {response.status_code} in {duration_ms:.2f}ms"
                )
            return response
        except Exception:
            # the request ID is only in context until the finally block below
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                f"Unhandled error serving {request.method} {request.url.path} "
                f"after {duration_ms:.2f}ms"
            )
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"code": 500, "message": "Internal server error"},
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            reset_request_id(token)
