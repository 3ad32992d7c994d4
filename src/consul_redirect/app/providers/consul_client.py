"""Async HTTP client for the Consul catalog API.

Wraps ``GET /v1/catalog/service/<name>?tag=<port type>`` and converts the
catalog rows into ``CatalogEntry`` values. Auth uses the optional ACL token
(``X-Consul-Token``). Failures are not retried: a redirect request is
interactive, so the error is reported to the user immediately.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..errors import ConsulAPIError, ConsulTimeoutError, ConsulUnavailableError
from ..routing.entries import CatalogEntry

logger = logging.getLogger(__name__)


class ConsulCatalogClient:
    """Catalog lookups against a Consul agent.

    Args:
        base_url: Consul HTTP API address, e.g. ``http://127.0.0.1:8500``.
        token: Optional ACL token.
        http_client: Shared ``httpx.AsyncClient``. The caller owns its lifecycle.
        timeout_seconds: Per-request timeout.
    """

    def __init__(
        self,
        *,
        base_url: str = "http://127.0.0.1:8500",
        token: str = "",
        http_client: httpx.AsyncClient,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = http_client
        self._timeout = float(timeout_seconds)

    def _headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"X-Consul-Token": self._token}

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.status_code < 400:
            return

        body = resp.text
        message = body[:200].strip() if body else f"HTTP {resp.status_code}"
        raise ConsulAPIError(status_code=resp.status_code, message=message)

    async def query(self, service_name: str, port_type: str) -> list[CatalogEntry]:
        """List catalog entries for ``service_name``, filtered by tag ``port_type``.

        Raises:
            ConsulTimeoutError: If the agent does not answer in time.
            ConsulUnavailableError: If the agent cannot be reached.
            ConsulAPIError: On an error status or a malformed payload.
        """
        path = f"/v1/catalog/service/{quote(service_name, safe='')}"
        params: dict[str, str] = {}
        if port_type:
            params["tag"] = port_type

        try:
            resp = await self._client.get(
                f"{self._base_url}{path}",
                headers=self._headers(),
                params=params,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise ConsulTimeoutError(str(e) or "Request timed out") from e
        except httpx.HTTPError as e:
            raise ConsulUnavailableError(f"Consul unreachable at {self._base_url}: {e}") from e

        self._raise_for_status(resp)

        try:
            payload = resp.json()
        except ValueError as e:
            raise ConsulAPIError(resp.status_code, "response is not JSON") from e

        if not isinstance(payload, list):
            raise ConsulAPIError(
                status_code=resp.status_code,
                message=f"Expected list from {path}, got {type(payload).__name__}",
            )

        return [self._to_entry(row, resp.status_code) for row in payload]

    @staticmethod
    def _to_entry(row: Any, status_code: int) -> CatalogEntry:
        if not isinstance(row, dict):
            raise ConsulAPIError(status_code, f"catalog row is not an object: {row!r}")

        try:
            entry = CatalogEntry(
                hostname=str(row["Node"]),
                tags=tuple(str(tag) for tag in row.get("ServiceTags") or ()),
                port=int(row["ServicePort"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConsulAPIError(status_code, f"malformed catalog row: {e}") from e

        if not 0 <= entry.port <= 65535:
            raise ConsulAPIError(
                status_code, f"malformed catalog row: port {entry.port} out of range",
            )

        logger.debug(
            "Catalog entry: node=%s address=%s port=%d tags=%s",
            entry.hostname,
            row.get("Address", ""),
            entry.port,
            ",".join(entry.tags),
        )
        return entry
