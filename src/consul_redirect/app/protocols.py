"""Catalog client protocol for dependency injection.

The resolver depends only on this contract. ``ConsulCatalogClient`` talks
to a real Consul agent; ``InMemoryCatalogClient`` serves local development
and tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .errors import CatalogError
from .routing.entries import CatalogEntry

__all__ = ['CatalogClient', 'CatalogError']


@runtime_checkable
class CatalogClient(Protocol):
    """Service catalog lookup.

    ``port_type`` is a tag filter; an empty string means no filter.
    Implementations raise ``CatalogError`` (or a subclass) on failure.
    """

    async def query(self, service_name: str, port_type: str) -> list[CatalogEntry]: ...
