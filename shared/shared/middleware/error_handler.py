import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Last line of defence: an unexpected exception becomes a 500, never a crash.

    HTTPException subclasses are rendered by FastAPI before they get here.
    """
    try:
        return await call_next(request)
    except Exception:
        request_id = getattr(request.state, "request_id", None)
        logger.exception("Unhandled exception on %s %s [%s]", request.method, request.url.path, request_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "request_id": request_id,
            },
        )
