from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from mailer.errors import HttpError
from mailer.loops.client import LoopsAPIError
import httpx
import logging

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = {"success": False, "error": "Internal server error"}

async def http_error_handler(request: Request, exc: HttpError):
    logger.error(f"{exc.status_code} {exc.reason} {exc.message}; {exc.details}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Malformed request", "reason": "malformed-request"}
    )

async def upstream_error_handler(request: Request, exc: Exception):
    """Loops or CAPTCHA provider failure, never retried"""
    logger.error(f"Upstream failure on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=INTERNAL_SERVER_ERROR)

async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=INTERNAL_SERVER_ERROR)

def setup_error_handlers(app: FastAPI):
    """Render every failure as {success: false, error, reason?}

    Handlers for specific exception types run inside the middleware stack,
    so their responses still get CORS and cache headers. The catch-all
    Exception handler runs outside it.
    """
    app.add_exception_handler(HttpError, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(LoopsAPIError, upstream_error_handler)
    app.add_exception_handler(httpx.HTTPError, upstream_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
