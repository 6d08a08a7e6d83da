# ops/responses.py
"""
Uniform response envelope.

Every API response, success or failure, has the shape:

    {"statusCode": 200, "data": {...}, "message": "...", "success": true}

Failures set data to null and add "code", the machine-readable ErrorKind.
Validation failures also carry "errors" with the per-field details.
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ops.results import CommandResult, ErrorKind

logger = logging.getLogger(__name__)


def envelope(data=None, message: str = "", status_code: int = 200) -> Response:
    """Build a success envelope."""
    return Response(
        {
            "statusCode": status_code,
            "data": data,
            "message": message,
            "success": status_code < 400,
        },
        status=status_code,
    )


def error_envelope(message: str, kind: ErrorKind, errors=None) -> Response:
    body = {
        "statusCode": kind.status_code,
        "data": None,
        "message": message,
        "success": False,
        "code": kind.value,
    }
    if errors is not None:
        body["errors"] = errors
    return Response(body, status=kind.status_code)


def result_response(result: CommandResult, message: str, status_code: int = 200, serialize=None) -> Response:
    """
    Turn a CommandResult into an envelope.

    Args:
        result: The command outcome
        message: Human-readable message used on success
        status_code: Status for the success case (201 for creations)
        serialize: Optional callable turning result.data into JSON data
    """
    if not result.success:
        return error_envelope(result.error, result.kind or ErrorKind.INTERNAL)
    data = serialize(result.data) if serialize else result.data
    return envelope(data, message, status_code)


# DRF exception class -> ErrorKind. Order matters: subclasses first.
_EXCEPTION_KINDS = (
    (exceptions.ValidationError, ErrorKind.INVALID_INPUT),
    (exceptions.ParseError, ErrorKind.INVALID_INPUT),
    (exceptions.NotAuthenticated, ErrorKind.UNAUTHORIZED),
    (exceptions.AuthenticationFailed, ErrorKind.UNAUTHORIZED),
    (exceptions.PermissionDenied, ErrorKind.FORBIDDEN),
    (exceptions.NotFound, ErrorKind.NOT_FOUND),
)


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for key, value in detail.items():
            msg = _first_message(value)
            return msg if key == "non_field_errors" else f"{key}: {msg}"
        return "Invalid input"
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else "Invalid input"
    return str(detail)


def envelope_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER that keeps the original status code of known
    errors and turns everything else into a generic 500.
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(str(exc) or "Not found.")
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied(str(exc) or None)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s",
            type(view).__name__ if view else "unknown view",
            exc_info=exc,
        )
        return error_envelope("Internal server error", ErrorKind.INTERNAL)

    kind = next(
        (k for cls, k in _EXCEPTION_KINDS if isinstance(exc, cls)),
        None,
    )
    if kind is None:
        # Throttled, MethodNotAllowed, UnsupportedMediaType, ...
        response.data = {
            "statusCode": response.status_code,
            "data": None,
            "message": _first_message(getattr(exc, "detail", str(exc))),
            "success": False,
            "code": getattr(exc, "default_code", "error"),
        }
        return response

    detail = getattr(exc, "detail", str(exc))
    errors = detail if isinstance(exc, exceptions.ValidationError) else None
    envelope_response = error_envelope(_first_message(detail), kind, errors=errors)
    for header in ("WWW-Authenticate", "Retry-After"):
        if header in response:
            envelope_response[header] = response[header]
    envelope_response.status_code = response.status_code
    envelope_response.data["statusCode"] = response.status_code
    return envelope_response
