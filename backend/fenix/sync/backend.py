from __future__ import annotations

import logging
import uuid
from typing import Any

import httpx
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential

from fenix.core.config import settings

logger = logging.getLogger(__name__)


class BackendError(RuntimeError):
    """The ledger backend refused a well-formed request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendUnavailable(BackendError):
    """Network/timeout failure, server error, or a table the backend does not serve."""


def _detail(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text[:200]
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return r.text[:200]


class LedgerBackend:
    """
    Async HTTP client for the ledger backend.

    Row-level select/insert/update/upsert/delete per table, each write returning the
    canonical stored row, plus named server-side procedures (rpc).
    Transport errors are retried with exponential backoff before giving up.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        retry_attempts: int | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.backend_timeout_seconds,
            headers={"Accept": "application/json"},
        )
        self._retry_attempts = retry_attempts or settings.backend_retry_attempts

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
                retry=retry_if_exception_type(httpx.TransportError),
            ):
                with attempt:
                    r = await self._client.request(method, path, json=json)
        except RetryError as e:
            raise BackendUnavailable(f"{method} {path} failed (network/timeout): {e.last_attempt.exception()}") from e

        if r.status_code >= 500:
            raise BackendUnavailable(f"{method} {path} failed: {r.status_code} {_detail(r)}", status_code=r.status_code)
        if r.status_code == 404 and _detail(r) == "Not Found":
            # Starlette's answer for an unknown route: the table is not served at all.
            raise BackendUnavailable(f"{method} {path}: not served by backend", status_code=404)
        if r.status_code >= 400:
            raise BackendError(_detail(r), status_code=r.status_code)
        return r

    def _json(self, r: httpx.Response, *, empty: Any = None) -> Any:
        """
        Decoded body of a 2xx answer. An empty body (204) yields `empty` when the
        caller allows one; anything that is not JSON did not come from the ledger.
        """
        if not r.content:
            if empty is not None:
                return empty
            raise BackendUnavailable(f"{r.request.method} {r.request.url.path}: empty response", status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise BackendUnavailable(
                f"{r.request.method} {r.request.url.path}: response is not JSON ({r.headers.get('content-type', '?')})",
                status_code=r.status_code,
            ) from e

    async def rpc(self, name: str) -> dict[str, Any]:
        r = await self._send("POST", f"/rpc/{name}")
        return self._json(r, empty={})

    async def select(self, table: str) -> list[dict[str, Any]]:
        r = await self._send("GET", f"/{table}/")
        return self._json(r)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        r = await self._send("POST", f"/{table}/", json=row)
        return self._json(r)

    async def upsert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        r = await self._send("PUT", f"/{table}/", json=row)
        return self._json(r)

    async def update(self, table: str, row_id: uuid.UUID, changes: dict[str, Any]) -> dict[str, Any]:
        r = await self._send("PATCH", f"/{table}/{row_id}", json=changes)
        return self._json(r)

    async def delete(self, table: str, row_id: uuid.UUID) -> None:
        await self._send("DELETE", f"/{table}/{row_id}")
