"""Domain errors raised by the service layer and the DRF exception handler
that turns them (and everything else) into JSON responses.
"""
import logging

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def payload(self) -> dict:
        data = {'message': self.message}
        data.update(self.extra)
        return data


class InvalidRequest(ServiceError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ServiceError):
    """A legal request that the current state does not allow."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


def custom_exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        return Response(exc.payload(), status=exc.status_code)

    if isinstance(exc, ValidationError):
        errors = exc.detail if isinstance(exc.detail, dict) else {'non_field_errors': exc.detail}
        return Response(
            {'message': 'Validation failed', 'errors': errors},
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if isinstance(exc, Http404):
        return Response({'message': str(exc) or 'Not found.'}, status=status.HTTP_404_NOT_FOUND)

    response = exception_handler(exc, context)
    if response is not None:
        detail = getattr(exc, 'detail', None)
        response.data = {'message': str(detail) if detail is not None else str(exc)}
        return response

    view = context.get('view') if context else None
    logger.exception('Unhandled error in %s', type(view).__name__ if view is not None else 'unknown view')
    return Response(
        {'message': 'An unexpected error occurred.'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
