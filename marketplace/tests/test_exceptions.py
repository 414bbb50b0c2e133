from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.exceptions import MethodNotAllowed, ValidationError

from marketplace.exceptions import (
    Forbidden,
    InvalidArgument,
    NotFound,
    RateLimited,
    Unauthenticated,
    inbox_exception_handler,
)


class InboxExceptionHandlerTest(SimpleTestCase):
    def handle(self, exc):
        return inbox_exception_handler(exc, {'view': None})

    def test_error_kinds_map_to_status_codes(self):
        cases = [
            (Unauthenticated(), status.HTTP_401_UNAUTHORIZED, 'unauthenticated'),
            (Forbidden(), status.HTTP_403_FORBIDDEN, 'forbidden'),
            (NotFound("Conversation not found"), status.HTTP_404_NOT_FOUND, 'not_found'),
            (InvalidArgument("Message text cannot be empty"), status.HTTP_400_BAD_REQUEST, 'invalid_argument'),
        ]
        for exc, status_code, kind in cases:
            response = self.handle(exc)
            self.assertEqual(response.status_code, status_code)
            self.assertEqual(response.data, {'error': exc.message, 'kind': kind})

    def test_default_message(self):
        self.assertEqual(self.handle(Unauthenticated()).data['error'], 'Authentication required')

    def test_rate_limited_sets_retry_after(self):
        response = self.handle(RateLimited(retry_after=12))

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response['Retry-After'], '12')

    def test_drf_errors_are_reshaped(self):
        response = self.handle(MethodNotAllowed('DELETE'))

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.data['kind'], 'error')

        response = self.handle(ValidationError({'text': ['Not a valid string.']}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['kind'], 'invalid_argument')
        self.assertEqual(response.data['error'], {'text': ['Not a valid string.']})

    def test_unknown_errors_fall_through(self):
        with self.assertLogs('marketplace.exceptions', level='ERROR'):
            self.assertIsNone(self.handle(RuntimeError("boom")))
