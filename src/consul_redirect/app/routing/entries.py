"""Catalog entries: one Consul service instance a request can be redirected to."""

from __future__ import annotations

from dataclasses import dataclass

from starlette.datastructures import URL

from .urls import build_url_with_port


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """A registered service node and port.

    Attributes:
        hostname: Consul node name (not yet qualified with the suffix).
        tags: Service tags in catalog order.
        port: Service port on that node.
    """

    hostname: str
    tags: tuple[str, ...]
    port: int

    def guess_scheme(self) -> str:
        """Infer the URL scheme from the service tags.

        The first tag equal to ``http`` or ``https`` (any case) wins.
        """
        for tag in self.tags:
            lowered = tag.lower()
            if lowered in ('http', 'https'):
                return lowered
        return 'http'

    def build_url(self, hostname: str, original_url: URL | str) -> URL:
        """Redirect ``original_url`` to this entry's port on ``hostname``."""
        return build_url_with_port(hostname, original_url, self.guess_scheme(), self.port)

    @property
    def tags_display(self) -> str:
        """Tags formatted for listings: ``" (a, b)"`` or ``""``."""
        joined = ', '.join(self.tags)
        return f' ({joined})' if joined else ''
