"""
Error taxonomy for the inbox core and the DRF exception handler that maps it
onto HTTP responses.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InboxError(Exception):
    """Base class for terminal, locally detected inbox errors."""

    kind = 'internal'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Unexpected error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(InboxError):
    kind = 'unauthenticated'
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = 'Authentication required'


class Forbidden(InboxError):
    kind = 'forbidden'
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'Not a participant of this conversation'


class NotFound(InboxError):
    kind = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found'


class InvalidArgument(InboxError):
    kind = 'invalid_argument'
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid argument'


class RateLimited(InboxError):
    kind = 'rate_limited'
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = 'Too many requests'

    def __init__(self, message=None, retry_after=None):
        super().__init__(message)
        self.retry_after = retry_after


# DRF status codes that do not come from InboxError still get a kind
STATUS_KINDS = {
    status.HTTP_400_BAD_REQUEST: InvalidArgument.kind,
    status.HTTP_401_UNAUTHORIZED: Unauthenticated.kind,
    status.HTTP_403_FORBIDDEN: Forbidden.kind,
    status.HTTP_404_NOT_FOUND: NotFound.kind,
    status.HTTP_429_TOO_MANY_REQUESTS: RateLimited.kind,
}


def error_payload(kind, message):
    return {'error': message, 'kind': kind}


def inbox_exception_handler(exc, context):
    """
    Custom exception handler for DRF.

    InboxError subclasses become ``{"error": message, "kind": kind}`` with the
    matching status code. DRF's own exceptions are reshaped the same way.
    Anything else returns None so Django's 500 handling takes over.
    """
    if isinstance(exc, InboxError):
        headers = {}
        if isinstance(exc, RateLimited) and exc.retry_after:
            headers['Retry-After'] = str(exc.retry_after)
        return Response(error_payload(exc.kind, exc.message), status=exc.status_code, headers=headers)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.error(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}", exc_info=True)
        return None

    message = response.data
    if isinstance(message, dict) and 'detail' in message:
        message = message['detail']
    response.data = error_payload(STATUS_KINDS.get(response.status_code, 'error'), message)
    return response
