"""Turn resolution outcomes into HTTP responses.

Redirects use ``307 Temporary Redirect`` so the method and body survive.
Listing and error outcomes render the HTML fragments in ``templates/``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from .routing.outcomes import (
    MultipleResults,
    NoResults,
    ParseError,
    QueryError,
    ResolutionOutcome,
    SingleRedirect,
    StaticRedirect,
    UiRedirect,
    UrlBuildError,
)
from .routing.urls import CONSUL_UI_PORT, NOMAD_UI_PORT
from .settings import RedirectSettings

TEMPLATES_DIR = Path(__file__).parent / 'templates'

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def quick_links(settings: RedirectSettings, hostname: str) -> dict[str, Any]:
    """Template context for the Nomad/Consul UI links."""
    return {
        'nomad_host': settings.nomad_ui_hostname or hostname,
        'nomad_port': NOMAD_UI_PORT,
        'consul_host': settings.consul_ui_hostname or hostname,
        'consul_port': CONSUL_UI_PORT,
    }


def render_outcome(
    request: Request,
    outcome: ResolutionOutcome,
    *,
    hostname: str,
    settings: RedirectSettings,
) -> Response:
    """Build the response for ``outcome``.

    Raises:
        TypeError: If ``outcome`` is not a known outcome type.
    """
    if isinstance(outcome, (StaticRedirect, UiRedirect, SingleRedirect)):
        return RedirectResponse(url=outcome.url, status_code=307)

    if isinstance(outcome, MultipleResults):
        return templates.TemplateResponse(
            request,
            'results.html',
            {
                'service_name': outcome.service_name,
                'port_type': outcome.port_type,
                'results': outcome.entries,
                **quick_links(settings, hostname),
            },
        )

    if isinstance(outcome, NoResults):
        return templates.TemplateResponse(
            request,
            'no_results.html',
            {
                'service_name': outcome.service_name,
                'port_type': outcome.port_type,
                **quick_links(settings, hostname),
            },
            status_code=404,
        )

    if isinstance(outcome, ParseError):
        return templates.TemplateResponse(
            request,
            'parse_error.html',
            {'hostname': outcome.hostname, **quick_links(settings, hostname)},
        )

    if isinstance(outcome, QueryError):
        return templates.TemplateResponse(
            request,
            'query_error.html',
            {'hostname': outcome.hostname, 'error': outcome.error},
            status_code=500,
        )

    if isinstance(outcome, UrlBuildError):
        return templates.TemplateResponse(
            request,
            'url_build_error.html',
            {'hostname': outcome.hostname, 'error': outcome.error},
            status_code=500,
        )

    raise TypeError(f'unhandled resolution outcome: {outcome!r}')
