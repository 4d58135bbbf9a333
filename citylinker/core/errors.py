"""API error type and exception handlers rendering every failure as {"message": ...}."""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Erreur interne du serveur"
NOT_IMPLEMENTED_MESSAGE = "Fonctionnalité non implémentée"
INVALID_BODY_MESSAGE = "Données invalides"

# Replaces the whole message whenever validation fails on these fields.
FIELD_MESSAGES = {
    "email": "Email invalide",
}

# Starlette's default details for routing errors.
HTTP_STATUS_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Ressource non trouvée",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Méthode non autorisée",
}


class ApiError(Exception):
    """Raised by routes and dependencies; rendered with its status and French message."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def _field_name(loc: tuple[Any, ...]) -> str | None:
    names = [str(part) for part in loc if isinstance(part, str) and part not in ("body", "query", "path")]
    return names[-1] if names else None


def validation_error_message(errors: list[dict[str, Any]]) -> str:
    """Render the first Pydantic error as a short French sentence."""
    if not errors:
        return INVALID_BODY_MESSAGE
    error = errors[0]
    field = _field_name(tuple(error.get("loc", ())))
    ctx = error.get("ctx") or {}
    kind = error.get("type", "")

    if field in FIELD_MESSAGES:
        return FIELD_MESSAGES[field]
    if field is None:
        if kind == "json_invalid":
            return "JSON invalide"
        return INVALID_BODY_MESSAGE
    if kind == "missing":
        return f"{field} : champ requis"
    if kind == "string_too_short":
        return f"{field} : au moins {ctx.get('min_length')} caractères"
    if kind == "string_too_long":
        return f"{field} : au plus {ctx.get('max_length')} caractères"
    if kind == "greater_than_equal":
        return f"{field} : doit être supérieur ou égal à {ctx.get('ge')}"
    if kind == "less_than_equal":
        return f"{field} : doit être inférieur ou égal à {ctx.get('le')}"
    if kind in ("int_parsing", "int_type", "int_from_float"):
        return f"{field} : nombre entier attendu"
    if kind == "value_error" and ctx.get("error") is not None:
        return str(ctx["error"])
    return f"{field} : valeur invalide"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message)


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if not isinstance(detail, str) or detail == HTTPStatus(exc.status_code).phrase:
        detail = HTTP_STATUS_MESSAGES.get(exc.status_code, INTERNAL_ERROR_MESSAGE)
    return _error_response(exc.status_code, detail)


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST, validation_error_message(list(exc.errors()))
    )


async def not_implemented_handler(request: Request, exc: NotImplementedError) -> JSONResponse:
    logger.warning(
        "Unimplemented capability",
        extra={"method": request.method, "path": request.url.path, "reason": str(exc)[:200]},
    )
    return _error_response(status.HTTP_501_NOT_IMPLEMENTED, NOT_IMPLEMENTED_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s: %s", request.method, request.url.path, exc
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotImplementedError, not_implemented_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
