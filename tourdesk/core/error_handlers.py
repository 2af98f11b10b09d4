"""Centralized exception handlers for the tourdesk service."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tourdesk.core.result import DomainException

logger = logging.getLogger(__name__)


def _flatten_detail(detail: Any) -> str:
    """Convert arbitrary exception detail payloads into a string message."""
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict):
        if "detail" in detail:
            nested = detail["detail"]
            if isinstance(nested, str):
                return nested
        return "; ".join(f"{key}: {value}" for key, value in detail.items())
    if isinstance(detail, Iterable) and not isinstance(detail, (bytes, bytearray)):
        return "; ".join(_flatten_detail(item) for item in detail)
    if detail is None:
        return "Ocurrió un error"
    return str(detail)


def error_envelope(code: int, message: str, errors: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"code": code, "message": message}
    if errors is not None:
        content["errors"] = jsonable_encoder(errors)
    return JSONResponse(status_code=code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Register FastAPI exception handlers that return the ``{code, message}`` envelope."""

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:  # type: ignore[override]
        error = exc.error
        return error_envelope(error.status_code, error.message, error.errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        response = error_envelope(exc.status_code, _flatten_detail(exc.detail))

        if exc.headers:
            for key, value in exc.headers.items():
                response.headers[key] = value

        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:  # type: ignore[override]
        errors = []
        for error in exc.errors():
            location = [str(loc) for loc in error.get("loc", []) if loc != "body"]
            errors.append(
                {
                    "campo": ".".join(location) if location else None,
                    "mensaje": error.get("msg", "Valor inválido"),
                }
            )

        return error_envelope(
            status.HTTP_400_BAD_REQUEST, "Datos de entrada inválidos", errors
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:  # type: ignore[override]
        logger.exception(
            "Unhandled exception while processing %s %s", request.method, request.url
        )
        return error_envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor"
        )


__all__ = ["error_envelope", "register_exception_handlers"]
