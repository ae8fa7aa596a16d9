"""
HTTP client module for the salary service API.

Async client used by front ends and scripts to read the data snapshot,
register names and submit salary entries.
"""

from typing import Any, Dict, List, Optional

import httpx

from .logging_config import get_logger, get_request_id
from .models import DataSnapshot, SalaryEntry

logger = get_logger(__name__)


class SalaryServiceClientError(Exception):
    """
    Raised when a request to the salary service fails.

    Attributes:
        message: Error message (the response body for HTTP errors)
        status_code: HTTP status code, None for transport failures
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class SalaryServiceClient:
    """
    Client for the salary service endpoints.

    Keeps one persistent ``httpx.AsyncClient``. A custom transport can be
    supplied, which is how the tests run the client against the app
    in-process.

    Attributes:
        base_url: Base URL of the salary service
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "SalaryServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_request_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(
                method, path, json=payload, headers=self._get_request_headers()
            )
        except httpx.HTTPError as e:
            logger.error("Salary service request failed", method=method, path=path, error=str(e))
            raise SalaryServiceClientError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                "Salary service returned an error",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise SalaryServiceClientError(response.text, status_code=response.status_code)

        return response.json()

    async def get_data(self) -> DataSnapshot:
        """Fetch every name and entry."""
        data = await self._request("GET", "/data")
        return DataSnapshot.model_validate(data)

    async def add_name(self, name: str) -> List[str]:
        """
        Register a name.

        Returns:
            The updated list of names
        """
        return await self._request("POST", "/names", {"name": name})

    async def save_entry(self, entry: SalaryEntry) -> List[SalaryEntry]:
        """
        Submit a salary entry.

        Returns:
            The updated list of entries
        """
        data = await self._request("POST", "/entries", entry.model_dump())
        return [SalaryEntry.model_validate(item) for item in data]

    async def health_check(self) -> bool:
        """Return True if the service answers its health endpoint."""
        try:
            data = await self._request("GET", "/health")
        except SalaryServiceClientError:
            return False
        return data.get("status") == "healthy"
