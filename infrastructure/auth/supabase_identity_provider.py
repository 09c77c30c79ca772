"""Supabase Auth implementation of IdentityProvider."""

import logging

from supabase import Client

from application.exceptions import AuthenticationError
from application.ports.identity_provider import AuthenticatedUser

logger = logging.getLogger(__name__)


class SupabaseIdentityProvider:
    """Verifies access tokens with the Supabase Auth server."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def resolve_user(self, token: str) -> AuthenticatedUser:
        try:
            response = self._client.auth.get_user(token)
        except Exception as e:
            raise AuthenticationError(f"Auth error: {getattr(e, 'message', None) or e}") from e

        user = getattr(response, "user", None) if response is not None else None
        if user is None or not getattr(user, "id", None):
            raise AuthenticationError("User not authenticated")

        return AuthenticatedUser(id=str(user.id), email=getattr(user, "email", None))
