"""Errors raised by the usage and subscription use cases."""


class UsageServiceError(Exception):
    """Base error surfaced to callers as a 500 with its message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(UsageServiceError):
    """Missing or invalid bearer token, or no user behind it."""
    pass


class DataStoreError(UsageServiceError):
    """A read or write against the Supabase tables failed."""
    pass
