"""
Error taxonomy and DRF exception handler.

Services raise plain Django exceptions (Http404, PermissionDenied,
ValidationError) plus Conflict for duplicates. The handler renders all of
them as {"error": ..., "code": ...} with the matching HTTP status.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('security')


class Conflict(exceptions.APIException):
    """Duplicate resource (e.g. a second application to the same project)."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: 'BAD_REQUEST',
    status.HTTP_401_UNAUTHORIZED: 'UNAUTHORIZED',
    status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
    status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    status.HTTP_409_CONFLICT: 'CONFLICT',
    status.HTTP_429_TOO_MANY_REQUESTS: 'TOO_MANY_REQUESTS',
}


def _validation_message(exc: DjangoValidationError) -> str:
    return ' '.join(str(message) for message in exc.messages)


def api_exception_handler(exc, context):
    """
    Map service-layer exceptions onto the API error shape.

    Serializer validation errors keep DRF's per-field payload so clients
    can highlight the offending input.
    """
    if isinstance(exc, DjangoValidationError):
        return Response(
            {'error': _validation_message(exc), 'code': 'BAD_REQUEST'},
            status=status.HTTP_400_BAD_REQUEST
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        return response

    code = ERROR_CODES.get(response.status_code, 'ERROR')

    if response.status_code == status.HTTP_403_FORBIDDEN:
        request = context.get('request')
        user = getattr(request, 'user', None)
        logger.warning(
            f"Forbidden: {getattr(user, 'email', 'anonymous')} "
            f"on {getattr(request, 'path', '?')}"
        )

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    response.data = {
        'error': str(detail) if detail is not None else str(exc),
        'code': code,
    }
    return response
