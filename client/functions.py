"""
HTTP transport for invoking the backend functions.

Mirrors the hosted functions client: failures are reported on the returned
FunctionResponse instead of being raised, so callers branch on .error.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from client.session import SessionProvider

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass
class FunctionResponse:
    """Outcome of a function call: data on success, error message otherwise."""

    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FunctionsClient:
    """POSTs to <base_url>/functions/v1/<name> with the caller's bearer token."""

    def __init__(
        self,
        base_url: str,
        session: SessionProvider,
        api_key: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        path_prefix: str = "/functions/v1",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._api_key = api_key
        self._path_prefix = path_prefix.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    def url_for(self, name: str) -> str:
        return f"{self._base_url}{self._path_prefix}/{name}"

    async def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
        token = await self._session.get_access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        elif self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def invoke(self, name: str, body: Optional[Dict[str, Any]] = None) -> FunctionResponse:
        """Call a function and wrap the outcome."""
        try:
            response = await self._http.post(
                self.url_for(name),
                json=body or {},
                headers=await self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning("Function %s request failed: %s", name, e)
            return FunctionResponse(error=f"Failed to send a request to {name}: {e}")

        if response.is_error:
            return FunctionResponse(
                error=_error_from_response(response),
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = response.text
        return FunctionResponse(data=data, status_code=response.status_code)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()


def _error_from_response(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return f"Function returned status {response.status_code}"
