# taskflow/core/errors.py
# Turns every failure into the same {success, message, errors} envelope.
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskflow.schemas.envelope import ErrorEnvelope

logger = logging.getLogger(__name__)

REQUEST_SECTIONS = ("body", "query", "path", "header", "cookie")

def error_response(status_code: int, message: str, errors: list[str] | None = None, headers=None) -> JSONResponse:
    body = ErrorEnvelope(message=message, errors=errors).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)

def format_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in REQUEST_SECTIONS]
    field = ".".join(loc) or "body"
    return f"{field}: {error.get('msg', 'invalid value')}"

def server_error(db: Session, message: str) -> HTTPException:
    """Call from inside an ``except`` block: rolls back, logs the traceback, hides the detail."""
    db.rollback()
    logger.exception(message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [format_validation_error(error) for error in exc.errors()]
    logger.info("Rejected %s %s: %s", request.method, request.url.path, "; ".join(errors))
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation error", errors)

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
