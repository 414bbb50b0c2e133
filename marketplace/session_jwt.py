import jwt
from jwt import ExpiredSignatureError, InvalidTokenError
import logging
from django.conf import settings

logger = logging.getLogger(__name__)


class SessionTokenError(Exception):
    """Raised when a session token cannot be verified."""


def verify_session_jwt(token: str):
    """
    Verifies and decodes a session JWT issued by the marketplace auth service.

    Returns:
        dict: Decoded token claims
    Raises:
        SessionTokenError: If the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.SESSION_JWT_AUDIENCE,
            issuer=settings.SESSION_JWT_ISSUER,
        )
    except ExpiredSignatureError as e:
        logger.warning("Rejected expired session token", extra={"error": str(e)})
        raise SessionTokenError("Token has expired")
    except InvalidTokenError as e:
        logger.warning("Rejected invalid session token", extra={"error": str(e)})
        raise SessionTokenError(f"Invalid token: {str(e)}")

    if not payload.get("sub"):
        raise SessionTokenError("Invalid token: missing subject")
    return payload
