"""
Bearer-token authentication for the usage endpoints.

Tokens are Supabase access tokens issued to the web client. They are verified
by the Supabase Auth server through an IdentityProvider; nothing is decoded
locally.
"""

import logging
from typing import Optional

from application.exceptions import AuthenticationError
from application.ports.identity_provider import AuthenticatedUser, IdentityProvider

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Strip the Bearer prefix from an Authorization header.

    Raises:
        AuthenticationError: header missing, or no token after the prefix
    """
    if not authorization:
        raise AuthenticationError("No authorization header")
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise AuthenticationError("User not authenticated")
    return token


def authenticate(
    authorization: Optional[str],
    identity_provider: IdentityProvider,
) -> AuthenticatedUser:
    """
    Resolve the caller behind an Authorization header.

    Args:
        authorization: Raw header value ("Bearer <token>")
        identity_provider: Verifies the token

    Returns:
        AuthenticatedUser for the token

    Raises:
        AuthenticationError: missing header, rejected token, or no user
    """
    token = extract_bearer_token(authorization)
    user = identity_provider.resolve_user(token)
    logger.debug("Authenticated user %s", user.id)
    return user
