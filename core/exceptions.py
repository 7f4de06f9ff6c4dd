"""
API error taxonomy and the project-wide DRF exception handler.

Services raise the classes below; :func:`api_exception_handler` renders
them, and every other exception DRF knows about, into the response
envelope ``{success: false, message, errors?}``.  Anything DRF does not
recognise becomes a 500 without internal detail and is logged with its
traceback.
"""
from __future__ import annotations

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE = 'Not authorized to access this route. Please login.'


class ValidationError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Validation failed'
    default_code = 'invalid'

    def __init__(self, detail=None, errors=None):
        super().__init__(detail)
        self.errors = list(errors or [])


class AuthenticationError(exceptions.AuthenticationFailed):
    default_detail = 'Authentication failed'


class AuthorizationError(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Access denied'
    default_code = 'forbidden'


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found'
    default_code = 'not_found'


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists'
    default_code = 'conflict'


def flatten_errors(detail, prefix: str = '') -> list[str]:
    """Turn nested serializer errors into ``"field: message"`` strings."""
    out: list[str] = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key in ('non_field_errors', 'detail'):
                out.extend(flatten_errors(value, prefix))
            elif isinstance(key, int):
                # many=True children keyed by position
                out.extend(flatten_errors(value, f"{prefix}[{key}]"))
            else:
                out.extend(flatten_errors(value, f"{prefix}.{key}" if prefix else str(key)))
    elif isinstance(detail, list):
        for i, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                out.extend(flatten_errors(value, f"{prefix}[{i}]"))
            else:
                out.extend(flatten_errors(value, prefix))
    elif detail not in (None, ''):
        out.append(f"{prefix}: {detail}" if prefix else str(detail))
    return out


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        request = context.get('request')
        logger.error(
            'Unhandled error on %s %s',
            getattr(request, 'method', '-'), getattr(request, 'path', '-'),
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        set_rollback()
        return Response(
            {'success': False, 'message': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    errors: list[str] = []
    if isinstance(exc, exceptions.ValidationError):
        message = 'Validation failed'
        errors = flatten_errors(exc.detail)
    elif isinstance(exc, exceptions.NotAuthenticated):
        message = NOT_AUTHENTICATED_MESSAGE
    elif isinstance(exc, exceptions.Throttled):
        message = 'Too many requests, please try again later.'
    elif isinstance(exc, exceptions.APIException):
        message = str(exc.detail) if not isinstance(exc.detail, (dict, list)) else 'Request failed'
        if isinstance(exc.detail, (dict, list)):
            errors = flatten_errors(exc.detail)
        errors = errors or list(getattr(exc, 'errors', None) or [])
    else:
        message = str(exc)

    body = {'success': False, 'message': message}
    if errors:
        body['errors'] = errors
    resp.data = body
    return resp
