"""Boundary translator: every exception becomes the uniform error envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import ErrorType, ServiceError
from app.schemas.error import ErrorTypeDto, ExceptionBody, ExceptionResponse

logger = logging.getLogger(__name__)


def build_error_response(
    status_code: int,
    error_type: ErrorType,
    variables: list[str],
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    logger.error(
        "Exception is handled",
        extra={
            "status_code": status_code,
            "error_id": error_type.message_id,
            "variables": variables,
        },
    )
    body = ExceptionResponse(
        exception=ExceptionBody(
            statusCode=status_code,
            error=ErrorTypeDto(id=error_type.message_id, text=error_type.text),
            variables=variables,
        )
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def handle_service_error(_request: Request, exc: ServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return build_error_response(exc.status_code, exc.error_type, exc.variables, headers)


async def handle_request_validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    variables = []
    for error in exc.errors():
        # loc looks like ("body", "username"); drop the "body"/"query" source.
        loc = [str(part) for part in error.get("loc", ())[1:]] or ["body"]
        variables.append(f"{'.'.join(loc)}: {error.get('msg', 'invalid value')}")
    return build_error_response(400, ErrorType.JSON_SCHEMA_VALIDATOR, variables)


async def handle_http_exception(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        error_type = ErrorType.NOT_FOUND
    elif exc.status_code == 405:
        error_type = ErrorType.EXTRA_INPUT_NOT_ALLOWED
    elif exc.status_code >= 500:
        error_type = ErrorType.GENERIC_SERVICE_ERROR
    else:
        error_type = ErrorType.BASIC_INVALID_INPUT
    return build_error_response(
        exc.status_code, error_type, [str(exc.detail)], getattr(exc, "headers", None)
    )


async def handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return build_error_response(500, ErrorType.GENERIC_SERVICE_ERROR, [str(exc)])


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
