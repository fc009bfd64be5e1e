"""Domain error taxonomy and the DRF exception handler that renders it.

Every module-level exception derives from one of four families:

- ``ValidationError``: malformed input (empty cart, missing total, bad status).
- ``NotFoundError``: an order / product / user / sale id does not resolve.
- ``ConflictError``: a concurrent mutation was detected.
- ``InternalError``: the durable store failed; the message is opaque.

The API layer never catches these one by one: ``api_exception_handler``
maps the family to an HTTP status and a uniform error body::

    {"type": "validation_error", "errors": [{"code": "...", "detail": "..."}]}
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations raised by the service layer."""

    code = "error"
    error_type = "domain_error"
    http_status = status.HTTP_400_BAD_REQUEST


class ValidationError(DomainError):
    code = "invalid"
    error_type = "validation_error"
    http_status = status.HTTP_400_BAD_REQUEST


class NotFoundError(DomainError):
    code = "not_found"
    error_type = "not_found"
    http_status = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    code = "conflict"
    error_type = "conflict"
    http_status = status.HTTP_409_CONFLICT


class InternalError(DomainError):
    code = "internal_error"
    error_type = "internal_error"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal error.") -> None:
        super().__init__(message)


# ---------------------------------------------------------------------------
# DRF integration
# ---------------------------------------------------------------------------


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Render domain and DRF errors with the standard ``type`` / ``errors`` body."""
    if isinstance(exc, DomainError):
        detail = str(exc)
        if isinstance(exc, InternalError):
            detail = "Internal error."
        return Response(
            {
                "type": exc.error_type,
                "errors": [{"code": exc.code, "detail": detail}],
            },
            status=exc.http_status,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    response.data = {
        "type": _drf_error_type(exc),
        "errors": _flatten_drf_errors(response.data),
    }
    return response


def _drf_error_type(exc: Exception) -> str:
    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        return "authentication_error"
    if isinstance(exc, (drf_exceptions.PermissionDenied, DjangoPermissionDenied)):
        return "permission_error"
    if isinstance(exc, (drf_exceptions.ValidationError, drf_exceptions.ParseError)):
        return "validation_error"
    if isinstance(exc, (drf_exceptions.NotFound, Http404)):
        return "not_found"
    if isinstance(exc, drf_exceptions.Throttled):
        return "throttled"
    return "client_error"


def _flatten_drf_errors(data: Any, field: Optional[str] = None) -> List[Dict[str, Any]]:
    errors: List[Dict[str, Any]] = []
    if isinstance(data, dict):
        if "detail" in data and len(data) == 1:
            return _flatten_drf_errors(data["detail"], field)
        for key, value in data.items():
            nested = key if field is None else f"{field}.{key}"
            errors.extend(_flatten_drf_errors(value, nested))
    elif isinstance(data, list):
        for item in data:
            errors.extend(_flatten_drf_errors(item, field))
    else:
        error: Dict[str, Any] = {
            "code": getattr(data, "code", None) or "error",
            "detail": str(data),
        }
        if field is not None:
            error["field"] = field
        errors.append(error)
    return errors
