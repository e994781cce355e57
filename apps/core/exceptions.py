"""
Custom exceptions and DRF exception handler for the Shop Ledger.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ValidationError(APIException):
    """Raised when a ledger input (amount, due, kind, status) is invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid ledger input.'
    default_code = 'validation_error'


class InvalidTransitionError(APIException):
    """Raised when a transaction status change is not allowed."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Invalid status transition.'
    default_code = 'invalid_transition'


class TransactionNotFoundError(InvalidTransitionError):
    """Raised when a transaction does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Transaction not found.'
    default_code = 'transaction_not_found'


class CustomerNotFoundError(APIException):
    """Raised when a customer does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Customer not found.'
    default_code = 'customer_not_found'


class DuplicateMobileError(APIException):
    """Raised when a mobile number is already registered to another customer."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A customer with this mobile number already exists.'
    default_code = 'duplicate_mobile'


def custom_exception_handler(exc, context):
    """
    Custom DRF exception handler that returns consistent error responses.

    Handles all DRF exceptions and adds logging for server errors.
    """
    response = exception_handler(exc, context)

    if response is not None:
        error_data = {
            'error': True,
            'status_code': response.status_code,
            'detail': response.data,
        }
        response.data = error_data
    else:
        logger.exception(
            "Unhandled exception in %s",
            context.get('view', 'unknown'),
            exc_info=exc,
        )
        response = Response(
            {
                'error': True,
                'status_code': 500,
                'detail': 'An unexpected error occurred. Please try again later.',
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return response
