"""Standardized API error responses.

``api_exception_handler`` is installed as DRF's ``EXCEPTION_HANDLER``.
It renders every error with the same body::

    {
        "type": "client_error" | "validation_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": null}]
    }

Domain errors raised by the service layer are mapped by *kind* (see
``shared.domain.exceptions``); pydantic ``ValidationError`` raised while
building input DTOs is reported as a validation error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)

logger = structlog.get_logger(__name__)

DOMAIN_ERROR_STATUS: Dict[type, int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_409_CONFLICT,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
}


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    if isinstance(exc, DomainError):
        return _domain_error_response(exc)
    if isinstance(exc, PydanticValidationError):
        return _pydantic_error_response(exc)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            "type": "validation_error",
            "errors": _flatten_validation_detail(exc.detail),
        }
    elif isinstance(exc, APIException):
        response.data = {
            "type": "client_error" if response.status_code < 500 else "server_error",
            "errors": [
                {
                    "code": getattr(exc.detail, "code", exc.default_code),
                    "detail": str(exc.detail),
                    "attr": None,
                }
            ],
        }
    return response


def _domain_error_response(exc: DomainError) -> Response:
    http_status = status.HTTP_400_BAD_REQUEST
    for kind, kind_status in DOMAIN_ERROR_STATUS.items():
        if isinstance(exc, kind):
            http_status = kind_status
            break
    logger.info(
        "api.domain_error",
        error=type(exc).__name__,
        code=exc.code,
        status_code=http_status,
    )
    body = {
        "type": "validation_error" if isinstance(exc, InvalidArgumentError) else "client_error",
        "errors": [{"code": exc.code, "detail": str(exc), "attr": None}],
    }
    return Response(body, status=http_status)


def _pydantic_error_response(exc: PydanticValidationError) -> Response:
    errors = [
        {
            "code": "invalid_argument",
            "detail": error["msg"],
            "attr": ".".join(str(part) for part in error["loc"]) or None,
        }
        for error in exc.errors()
    ]
    return Response(
        {"type": "validation_error", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _flatten_validation_detail(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            child = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                child = attr
            errors.extend(_flatten_validation_detail(value, child))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                errors.extend(_flatten_validation_detail(value, f"{attr}.{index}" if attr else str(index)))
            else:
                errors.extend(_flatten_validation_detail(value, attr))
        return errors
    return [
        {
            "code": getattr(detail, "code", "invalid"),
            "detail": str(detail),
            "attr": attr,
        }
    ]
