import logging

from django.http import JsonResponse

from .exceptions import Unauthenticated, error_payload
from .session_jwt import SessionTokenError, verify_session_jwt

logger = logging.getLogger(__name__)


class SessionAuthMiddleware:
    """
    Resolves the calling user from an ``Authorization: Bearer <jwt>`` header.

    A valid token sets ``request.user_id`` (and name/role claims when present).
    A missing header leaves ``request.user_id = None`` so views decide whether
    identity is required. A present but invalid token is rejected with 401.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        # URLs that don't require authentication
        self.exempt_urls = [
            '/ping/',
            '/api/ping/',
            '/admin/',
            '/static/',
        ]

    def __call__(self, request):
        request.user_id = None
        request.user_name = None
        request.user_role = None
        request.is_authenticated = False

        if self._is_exempt_url(request.path):
            return self.get_response(request)

        auth_header = request.META.get('HTTP_AUTHORIZATION', '')
        if auth_header:
            if not auth_header.startswith('Bearer '):
                return self._reject("Wrong token format. Expected 'Bearer token'")

            token = auth_header.split(' ', 1)[1].strip()
            try:
                payload = verify_session_jwt(token)
            except SessionTokenError as e:
                return self._reject(str(e))

            request.user_id = payload['sub']
            request.user_name = payload.get('name')
            request.user_role = payload.get('role')
            request.is_authenticated = True

        return self.get_response(request)

    def _reject(self, message):
        logger.warning(f"Rejected request credentials: {message}")
        return JsonResponse(error_payload(Unauthenticated.kind, message), status=401)

    def _is_exempt_url(self, path):
        """Check if the URL path is exempt from authentication"""
        for exempt_url in self.exempt_urls:
            if path.startswith(exempt_url):
                return True
        return False
