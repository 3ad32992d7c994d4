"""Hostname → redirect target resolution.

Precedence (first match wins):

  1. Exact hostname in the custom route table.
  2. Hostname with ``.<hostname_suffix>`` removed in the custom route table.
  3. Nomad UI shortcut for node hostnames (when enabled).
  4. Consul catalog lookup of the parsed service address.

The resolver never raises for expected failures. Parse, query and URL
errors come back as outcome values so the HTTP layer can render them.
Cancellation of the calling task is not intercepted: an abandoned request
produces no outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.datastructures import URL

from ...observability.logging import get_logger
from ...observability.metrics import CATALOG_QUERY_DURATION_SECONDS, RESOLUTIONS_TOTAL
from ..errors import CatalogError
from ..settings import RedirectSettings
from .entries import CatalogEntry
from .hostname import ParsedAddress, parse_service_address
from .outcomes import (
    MultipleResults,
    NoResults,
    ParseError,
    QueryError,
    ResolutionOutcome,
    ResultLink,
    SingleRedirect,
    StaticRedirect,
    UiRedirect,
    UrlBuildError,
)
from .selection import order_entries
from .urls import NOMAD_UI_PORT, InvalidRedirectURL, add_hostname_suffix, build_url_with_port

if TYPE_CHECKING:
    from ..protocols import CatalogClient

logger = get_logger(__name__)

NOMAD_UI_LANDING_PATH = '/ui/clients'


class Resolver:
    """Resolve request hostnames to redirect outcomes.

    Holds only immutable settings and the catalog client, so one instance
    serves all concurrent requests.

    Args:
        settings: Routing configuration (custom routes, suffix, UI shortcut).
        catalog: Service catalog used for step 4.
    """

    def __init__(self, settings: RedirectSettings, catalog: CatalogClient) -> None:
        self._settings = settings
        self._catalog = catalog

    async def resolve(self, hostname: str, original_url: URL | str) -> ResolutionOutcome:
        """Resolve ``hostname`` (port already stripped) for ``original_url``."""
        outcome = await self._resolve(hostname, original_url)
        entries = _entry_count(outcome)
        RESOLUTIONS_TOTAL.labels(outcome=outcome.kind).inc()
        logger.info(
            'resolution_outcome',
            hostname=hostname,
            outcome=outcome.kind,
            entries=entries,
        )
        return outcome

    async def _resolve(self, hostname: str, original_url: URL | str) -> ResolutionOutcome:
        route = self.static_route(hostname)
        if route is not None:
            return StaticRedirect(url=route)

        if self.wants_nomad_ui(hostname):
            return self._nomad_ui_redirect(hostname, original_url)

        address = parse_service_address(hostname)
        if not address.is_valid:
            return ParseError(hostname=hostname)

        try:
            entries = await self.query_catalog(hostname, address)
        except CatalogError as exc:
            logger.warning(
                'catalog_query_failed',
                hostname=hostname,
                service=address.service_name,
                port_type=address.port_type,
                error=str(exc),
            )
            return QueryError(hostname=hostname, error=exc)

        try:
            return self._select(hostname, address, entries, original_url)
        except InvalidRedirectURL as exc:
            return UrlBuildError(hostname=hostname, error=exc)

    # ── Precedence steps ──────────────────────────────────────────

    def static_route(self, hostname: str) -> str | None:
        """Return the custom route URL for ``hostname``, trying the bare name second."""
        routes = self._settings.custom_routes
        url = routes.get(hostname)
        if url is not None:
            return url

        suffix = f'.{self._settings.hostname_suffix}'
        if hostname.endswith(suffix):
            return routes.get(hostname[: -len(suffix)])
        return None

    def wants_nomad_ui(self, hostname: str) -> bool:
        settings = self._settings
        if not settings.redirect_to_nomad_ui:
            return False
        return (
            hostname.endswith(settings.hostname_suffix)
            or hostname == settings.nomad_ui_hostname
        )

    def _nomad_ui_redirect(self, hostname: str, original_url: URL | str) -> ResolutionOutcome:
        try:
            url = build_url_with_port(hostname, original_url, 'http', NOMAD_UI_PORT)
        except InvalidRedirectURL as exc:
            logger.error('url_build_failed', hostname=hostname, error=str(exc))
            return UrlBuildError(hostname=hostname, error=exc)

        # Bare node hostname: land on the client list filtered to this node.
        if url.path in ('', '/'):
            url = url.replace(path=NOMAD_UI_LANDING_PATH, query=f'search={hostname}')

        return UiRedirect(url=str(url))

    async def query_catalog(self, hostname: str, address: ParsedAddress) -> list[CatalogEntry]:
        """Fetch and order the catalog entries for ``address``.

        Raises:
            CatalogError: If the catalog lookup fails.
        """
        if not address.service_name and not address.port_type:
            return []

        with CATALOG_QUERY_DURATION_SECONDS.time():
            entries = await self._catalog.query(address.service_name, address.port_type)

        logger.info(
            'catalog_query',
            hostname=hostname,
            service=address.service_name,
            port_type=address.port_type,
            entries=len(entries),
        )
        return order_entries(entries)

    def _select(
        self,
        hostname: str,
        address: ParsedAddress,
        entries: list[CatalogEntry],
        original_url: URL | str,
    ) -> ResolutionOutcome:
        if len(entries) == 1:
            # Keep the hostname the user typed; Consul DNS resolves it to the node.
            url = entries[0].build_url(hostname, original_url)
            return SingleRedirect(url=str(url))

        if not entries:
            return NoResults(service_name=address.service_name, port_type=address.port_type)

        links: list[ResultLink] = []
        for entry in entries:
            full_hostname = add_hostname_suffix(entry.hostname, self._settings.hostname_suffix)
            links.append(
                ResultLink(
                    url=str(entry.build_url(full_hostname, original_url)),
                    full_hostname=full_hostname,
                    port=entry.port,
                    tags_display=entry.tags_display,
                )
            )

        return MultipleResults(
            service_name=address.service_name,
            port_type=address.port_type,
            entries=tuple(links),
        )


def _entry_count(outcome: ResolutionOutcome) -> int | None:
    if isinstance(outcome, MultipleResults):
        return len(outcome.entries)
    if isinstance(outcome, SingleRedirect):
        return 1
    if isinstance(outcome, NoResults):
        return 0
    return None
