"""Access-token sources for the client trackers."""

from typing import Optional, Protocol


class SessionProvider(Protocol):
    """Supplies the signed-in user's access token, or None when signed out."""

    async def get_access_token(self) -> Optional[str]:
        ...


class StaticSession:
    """Session backed by a token held in memory."""

    def __init__(self, access_token: Optional[str] = None) -> None:
        self.access_token = access_token

    async def get_access_token(self) -> Optional[str]:
        return self.access_token

    def sign_out(self) -> None:
        self.access_token = None
