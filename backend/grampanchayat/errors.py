"""Exception handlers that render every error in the API envelope.

Errors come back as `{"success": false, "message": ...}` so the admin
panel can show `message` without caring where the failure came from.
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("grampanchayat.api")


def error_body(message, **extra) -> dict:
    body = {"success": False, "message": message}
    body.update(extra)
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content=error_body(message, errors=errors))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log with a short error id the client can quote back to us.

    This response is built outside the request middleware, so the request
    id is echoed here as well.
    """
    error_id = uuid.uuid4().hex[:12]
    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    logger.error(
        "unhandled exception [%s] in %s %s: %s",
        error_id,
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
        extra={"error_id": error_id, "request_id": request_id},
    )
    return JSONResponse(
        status_code=500,
        content=error_body("Internal Server Error", errorId=error_id, requestId=request_id),
        headers={"X-Request-ID": request_id} if request_id else None,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
