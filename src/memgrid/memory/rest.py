"""Row store over the managed service's PostgREST endpoint (/rest/v1)."""

from typing import Any

import httpx

from memgrid.auth.base import SessionProvider
from memgrid.core.errors import StoreError
from memgrid.core.logging import get_logger
from memgrid.memory.base import Row, RowStore

logger = get_logger("memory.rest")


def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class RestRowStore(RowStore):
    """PostgREST client.

    Requests carry the live session's access token when there is one, so
    row-level security on the service sees the same identity the app does.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        auth: SessionProvider | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.auth = auth
        self.timeout = timeout
        self._transport = transport

    async def _headers(self) -> dict[str, str]:
        token = self.anon_key
        if self.auth:
            session = await self.auth.get_session()
            if session and session.access_token:
                token = session.access_token
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    async def _request(
        self,
        operation: str,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        extra_headers: dict[str, str] | None = None,
    ) -> Any:
        headers = await self._headers()
        if extra_headers:
            headers.update(extra_headers)
        try:
            async with httpx.AsyncClient(
                base_url=f"{self.base_url}/rest/v1",
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, f"/{table}", params=params, json=json, headers=headers)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise StoreError(operation, f"HTTP {e.response.status_code}: {e.response.text}") from e
        except httpx.TimeoutException as e:
            raise StoreError(operation, "request timed out") from e
        except httpx.HTTPError as e:
            raise StoreError(operation, str(e)) from e
        except ValueError as e:
            raise StoreError(operation, "malformed response") from e

    async def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[Row]:
        params = {"select": "*"}
        for name, value in filters.items():
            params[name] = _filter_value(value)
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"

        data = await self._request(f"select {table}", "GET", table, params=params)
        if not isinstance(data, list):
            raise StoreError(f"select {table}", "expected a list of rows")
        logger.debug(f"select {table} {filters} -> {len(data)} rows")
        return data

    async def insert(self, table: str, row: Row) -> Row:
        data = await self._request(
            f"insert {table}",
            "POST",
            table,
            json=row,
            extra_headers={"Prefer": "return=representation", "Content-Type": "application/json"},
        )
        # PostgREST echoes inserted rows as an array
        if isinstance(data, list):
            if not data:
                raise StoreError(f"insert {table}", "no row returned")
            return data[0]
        if isinstance(data, dict):
            return data
        raise StoreError(f"insert {table}", "unexpected response shape")
