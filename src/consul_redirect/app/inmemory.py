"""In-memory catalog for local development and tests.

Satisfies the CatalogClient protocol but keeps registrations in a dict
(nothing survives a restart). Tag filtering mirrors Consul: an entry
matches a port type when that string is one of its tags.
"""

from __future__ import annotations

from .errors import CatalogError
from .routing.entries import CatalogEntry


class InMemoryCatalogClient:
    def __init__(self, services: dict[str, list[CatalogEntry]] | None = None) -> None:
        self._services: dict[str, list[CatalogEntry]] = {
            name: list(entries) for name, entries in (services or {}).items()
        }
        self._failure: CatalogError | None = None
        self.queries: list[tuple[str, str]] = []

    def register(self, service_name: str, entry: CatalogEntry) -> None:
        self._services.setdefault(service_name, []).append(entry)

    def fail_with(self, error: CatalogError | None) -> None:
        """Make every subsequent query raise ``error`` (``None`` to stop)."""
        self._failure = error

    async def query(self, service_name: str, port_type: str) -> list[CatalogEntry]:
        self.queries.append((service_name, port_type))
        if self._failure is not None:
            raise self._failure

        entries = self._services.get(service_name, [])
        if not port_type:
            return list(entries)
        return [e for e in entries if port_type in e.tags]
