"""Translation of Supabase client failures into DataStoreError."""

from contextlib import contextmanager
from typing import Iterator

import httpx
from postgrest.exceptions import APIError

from application.exceptions import DataStoreError


def store_error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or error.__class__.__name__


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Re-raise PostgREST and transport failures as DataStoreError."""
    try:
        yield
    except (APIError, httpx.HTTPError) as e:
        raise DataStoreError(store_error_message(e)) from e
