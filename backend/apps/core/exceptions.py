from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.views import exception_handler

from .responses import error_response

logger = logging.getLogger(__name__)


class ServiceError(exceptions.APIException):
    """
    Base for domain errors raised by the service layer.
    Each subclass carries an HTTP status and a stable error_code that ends up in
    the response envelope (error.code).
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request could not be processed."
    default_code = "bad_request"
    error_code = "BAD_REQUEST"

    def __init__(self, detail=None, details=None):
        super().__init__(detail=detail)
        self.details = details


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials."
    default_code = "unauthorized"
    error_code = "UNAUTHORIZED"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"
    error_code = "RESOURCE_NOT_FOUND"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action."
    default_code = "forbidden"
    error_code = "FORBIDDEN_ACTION"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource is in a conflicting state."
    default_code = "conflict"
    error_code = "CONFLICT"


class AlreadySolvedError(ConflictError):
    default_detail = "Challenge already solved."
    error_code = "CHALLENGE_ALREADY_SOLVED"


class AlreadyMemberError(ConflictError):
    default_detail = "You are already a member of this team."
    error_code = "ALREADY_TEAM_MEMBER"


class AlreadyAssignedError(ConflictError):
    default_detail = "This user is already assigned to this challenge."
    error_code = "USER_ALREADY_ASSIGNED"


class DuplicateResourceError(ConflictError):
    default_detail = "A resource with these attributes already exists."
    error_code = "DUPLICATE_RESOURCE"


class InvalidInputError(ServiceError):
    default_detail = "Invalid input."
    default_code = "invalid"
    error_code = "VALIDATION_ERROR"


class InvalidInviteCodeError(InvalidInputError):
    default_detail = "Invalid invite code."
    error_code = "INVALID_INVITE_CODE"


class IncorrectFlagError(InvalidInputError):
    default_detail = "Incorrect flag."
    error_code = "INCORRECT_FLAG"


# DRF exceptions -> envelope error codes
_DRF_CODES = (
    (exceptions.NotAuthenticated, "UNAUTHORIZED"),
    (exceptions.AuthenticationFailed, "UNAUTHORIZED"),
    (exceptions.PermissionDenied, "FORBIDDEN_ACCESS"),
    (exceptions.NotFound, "RESOURCE_NOT_FOUND"),
    (exceptions.ValidationError, "VALIDATION_ERROR"),
    (exceptions.ParseError, "VALIDATION_ERROR"),
    (exceptions.UnsupportedMediaType, "UNSUPPORTED_MEDIA_TYPE"),
    (exceptions.MethodNotAllowed, "METHOD_NOT_ALLOWED"),
    (exceptions.Throttled, "RATE_LIMITED"),
)


def _error_code(exc) -> str:
    if isinstance(exc, ServiceError):
        return exc.error_code
    for klass, code in _DRF_CODES:
        if isinstance(exc, klass):
            return code
    return str(getattr(exc, "default_code", "error")).upper()


def envelope_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER: every error leaves the API in the standard envelope.
    Unhandled exceptions are logged with their traceback and reported as an
    opaque SERVER_ERROR.
    """
    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "unknown view")
        return error_response(
            "Internal server error.",
            code="SERVER_ERROR",
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        message = "Invalid input."
        details = response.data
    else:
        message = str(response.data.get("detail", "")) if isinstance(response.data, dict) else str(response.data)
        details = getattr(exc, "details", None)

    envelope = error_response(message, code=_error_code(exc), status=response.status_code, details=details)
    # keep WWW-Authenticate / Retry-After produced by DRF
    for header, value in response.items():
        if header.lower() in ("www-authenticate", "retry-after"):
            envelope[header] = value
    return envelope
