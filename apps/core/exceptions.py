"""
Custom exceptions and DRF exception handler for the Property Calculators service.
"""

import logging

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class CalculationError(APIException):
    """Base class for errors raised while validating or computing loan figures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Calculation failed.'
    default_code = 'CalculationError'


class InvalidInputError(CalculationError):
    """Raised when loan terms are missing, non-numeric or not positive."""

    default_detail = 'Invalid input.'
    default_code = 'InvalidInput'


class OutOfRangeError(CalculationError):
    """Raised when loan terms exceed the configured bounds."""

    default_detail = 'Input out of range.'
    default_code = 'OutOfRange'


def _error_code(exc) -> str:
    if isinstance(exc, ValidationError):
        return InvalidInputError.default_code
    if isinstance(exc, Http404):
        return NotFound.default_code
    return getattr(exc, 'default_code', 'error')


def _error_message(exc) -> str:
    if isinstance(exc, ValidationError):
        return 'Request validation failed.'
    detail = getattr(exc, 'detail', exc)
    return str(detail)


def custom_exception_handler(exc, context):
    """
    Custom DRF exception handler that returns consistent error responses.

    Every error carries a machine-readable ``error`` code (``InvalidInput``,
    ``OutOfRange``, ``not_found``...), a human ``message`` and the raw DRF
    ``detail``. Unhandled exceptions are logged and become a 500.
    """
    response = exception_handler(exc, context)

    if response is not None:
        error_data = {
            'error': _error_code(exc),
            'message': _error_message(exc),
            'status_code': response.status_code,
            'detail': response.data,
        }
        if isinstance(exc, CalculationError):
            logger.info("Rejected calculation request: %s", error_data['message'])
        response.data = error_data
    else:
        # Unhandled exceptions: log and return 500
        logger.exception(
            "Unhandled exception in %s",
            context.get('view', 'unknown'),
            exc_info=exc,
        )
        response = Response(
            {
                'error': 'ServerError',
                'message': 'An unexpected error occurred. Please try again later.',
                'status_code': 500,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return response
