"""Thin async wrapper over one REST collection of the tracker API."""
from typing import Any

import httpx
import structlog

from src.client.exceptions import ApiError

logger = structlog.get_logger(__name__)


class ResourceApi:
    """CRUD calls against ``{base_url}{path}`` and ``{base_url}{path}/{id}``.

    Every failure surfaces as ApiError.
    """

    def __init__(self, http: httpx.AsyncClient, path: str):
        self.http = http
        self.path = path.rstrip("/")

    def _item_path(self, record_id: str) -> str:
        return f"{self.path}/{record_id}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(None, f"{method} {url} failed: {e}") from e

        if not response.is_success:
            raise ApiError(response.status_code, _error_message(response))

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(response.status_code, f"{method} {url} returned invalid JSON") from e

    async def list(self) -> list[dict[str, Any]]:
        payload = await self._request("GET", self.path)
        if not isinstance(payload, list):
            raise ApiError(None, f"GET {self.path} did not return a list")
        return payload

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", self.path, json=data)

    async def retrieve(self, record_id: str) -> dict[str, Any]:
        return await self._request("GET", self._item_path(record_id))

    async def update(self, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", self._item_path(record_id), json=data)

    async def delete(self, record_id: str) -> None:
        await self._request("DELETE", self._item_path(record_id))


def _error_message(response: httpx.Response) -> str:
    """Extract the server's {"error": ...} message, falling back to the status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"HTTP {response.status_code}"
