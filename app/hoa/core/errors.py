import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.hoa.core.error_catalog import AppError, ErrorCatalog
from app.hoa.core.logging import log_json

logger = logging.getLogger(__name__)

_HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def _validation_error_details(exc: RequestValidationError) -> dict:
    errors = []
    for error in exc.errors():
        loc = list(error.get("loc", []))
        field = ".".join(str(item) for item in loc if item not in {"body", "query", "path", "header"}) or None
        errors.append(
            {
                "field": field,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            }
        )
    return {"errors": errors}


def error_response(code: str, message: str, details: object, trace_id: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "code": code,
            "message": message,
            "error": message,
            "details": details,
            "trace_id": trace_id,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log_json(
            logger,
            {"event": "request_failed", "code": exc.error.code, "path": request.url.path, "trace_id": _trace_id(request)},
        )
        return error_response(exc.error.code, exc.message, exc.details, _trace_id(request), exc.error.status_code)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        message = str(exc.detail) if exc.detail is not None else "HTTP error"
        code = _HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
        return error_response(code, message, None, _trace_id(request), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(
            ErrorCatalog.VALIDATION_ERROR.code,
            ErrorCatalog.VALIDATION_ERROR.message,
            _validation_error_details(exc),
            _trace_id(request),
            ErrorCatalog.VALIDATION_ERROR.status_code,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return error_response(
            ErrorCatalog.INTERNAL_ERROR.code,
            ErrorCatalog.INTERNAL_ERROR.message,
            {"type": exc.__class__.__name__},
            _trace_id(request),
            ErrorCatalog.INTERNAL_ERROR.status_code,
        )
