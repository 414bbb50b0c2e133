"""
JWT utilities for the marketplace inbox.

Session tokens are issued by the marketplace auth service; this module mints
tokens with the same claims so tests and local tooling can act as any user.
"""

import jwt
import time
from django.conf import settings

from .session_jwt import SessionTokenError, verify_session_jwt


class JWTManager:
    """
    JWT Manager for token generation and validation.
    """

    def __init__(self):
        # Don't access settings immediately
        self._algorithm = None

    def _get_secret(self):
        """Get the signing secret shared with the auth service."""
        return settings.SESSION_JWT_SECRET

    def _get_algorithm(self):
        """Get the JWT algorithm, with lazy loading."""
        if self._algorithm is None:
            self._algorithm = getattr(settings, 'JWT_ALGORITHM', 'HS256')
        return self._algorithm

    def generate_token(self, user_id, expires_in_hours=24, **claims):
        """
        Generate a session JWT.

        Args:
            user_id (str): The user ID to include in the token
            expires_in_hours (int): Token expiration time in hours, negative for an expired token
            **claims: Extra claims (e.g. name, role)

        Returns:
            str: JWT token string
        """
        now = int(time.time())
        payload = {
            'sub': user_id,  # Subject (user ID)
            'aud': settings.SESSION_JWT_AUDIENCE,
            'iss': settings.SESSION_JWT_ISSUER,
            'iat': now,  # Issued at
            'exp': now + int(expires_in_hours * 3600),  # Expiration
        }
        payload.update(claims)

        return jwt.encode(payload, self._get_secret(), algorithm=self._get_algorithm())

    def extract_user_id(self, token):
        """
        Extract user ID from a JWT token.

        Returns:
            str: User ID from token, or None if invalid
        """
        try:
            return verify_session_jwt(token).get('sub')
        except SessionTokenError:
            return None


# Global JWT manager instance - create lazily
_jwt_manager = None

def _get_jwt_manager():
    """Get the global JWT manager instance, creating it if needed."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager


# Convenience functions for easy testing
def generate_test_token(user_id, expires_in_hours=24, **claims):
    """Generate a test JWT token for the given user ID."""
    return _get_jwt_manager().generate_token(user_id, expires_in_hours, **claims)


def get_user_id_from_token(token):
    """Extract user ID from JWT token."""
    return _get_jwt_manager().extract_user_id(token)
