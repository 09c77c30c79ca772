"""Port interface for resolving bearer tokens to users."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class AuthenticatedUser:
    """Verified caller identity."""

    id: str
    email: Optional[str] = None


class IdentityProvider(Protocol):
    """Exchanges an access token for a verified user."""

    def resolve_user(self, token: str) -> AuthenticatedUser:
        """Resolve the token.

        Raises:
            AuthenticationError: token rejected or no user behind it.
        """
        ...
