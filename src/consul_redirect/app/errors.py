"""Catalog error hierarchy.

Kept free of httpx types so callers never see transport objects (or the
ACL token) in error values that end up rendered on error pages.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base error for catalog lookups. The resolver reports these as query errors."""


class ConsulAPIError(CatalogError):
    """Consul answered with an error status or an unreadable payload."""

    def __init__(self, status_code: int, message: str = '') -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f'Consul API error {status_code}: {message}')


class ConsulTimeoutError(ConsulAPIError):
    """Request to the Consul agent timed out."""

    def __init__(self, message: str = 'Request timed out') -> None:
        super().__init__(0, message)


class ConsulUnavailableError(CatalogError):
    """The Consul agent could not be reached."""
