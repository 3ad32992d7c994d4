"""HTTP surface tests: app factory, health/metrics, and outcome rendering."""

from __future__ import annotations

from types import MappingProxyType

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from consul_redirect.app.errors import ConsulUnavailableError
from consul_redirect.app.inmemory import InMemoryCatalogClient
from consul_redirect.app.main import create_app
from consul_redirect.app.presentation import render_outcome
from consul_redirect.app.providers.consul_client import ConsulCatalogClient
from consul_redirect.app.routing.entries import CatalogEntry
from consul_redirect.app.routing.outcomes import (
    OUTCOME_TYPES,
    MultipleResults,
    NoResults,
    ParseError,
    QueryError,
    ResultLink,
    SingleRedirect,
    StaticRedirect,
    UiRedirect,
    UrlBuildError,
)
from consul_redirect.app.settings import RedirectSettings

SUFFIX = 'node.consul'


def _settings(**overrides) -> RedirectSettings:
    defaults = {
        'hostname_suffix': SUFFIX,
        'custom_routes': MappingProxyType({'grafana': 'https://grafana.example.com/'}),
    }
    defaults.update(overrides)
    return RedirectSettings(**defaults)


@pytest.fixture
def catalog() -> InMemoryCatalogClient:
    return InMemoryCatalogClient()


@pytest.fixture
def app(catalog) -> FastAPI:
    return create_app(_settings(), catalog_client=catalog)


def _client(app: FastAPI, host: str) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url=f'http://{host}')


class TestAppFactory:
    def test_returns_fastapi_app(self, app):
        assert isinstance(app, FastAPI)
        assert app.title == 'Consul Redirect'

    def test_default_catalog_is_consul(self):
        app = create_app(RedirectSettings())
        assert isinstance(app.state.resolver._catalog, ConsulCatalogClient)

    def test_invalid_settings_rejected(self):
        with pytest.raises(ValueError, match='port'):
            create_app(RedirectSettings(port=0), catalog_client=InMemoryCatalogClient())


class TestOperationalEndpoints:
    @pytest.mark.asyncio
    @pytest.mark.parametrize('path', ['/health', '/healthz', '/healthy'])
    async def test_health(self, app, catalog, path):
        async with _client(app, 'web.service.consul') as client:
            r = await client.get(path)
        assert r.status_code == 200
        assert r.text == 'ok'
        assert catalog.queries == []

    @pytest.mark.asyncio
    async def test_metrics(self, app, catalog):
        catalog.register('web', CatalogEntry('node1', (), 8080))
        async with _client(app, 'web.service.consul') as client:
            await client.get('/')
            r = await client.get('/metrics')
        assert r.status_code == 200
        assert 'consul_redirect_resolutions_total' in r.text
        assert 'http_server_requests_total' in r.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, app):
        async with _client(app, 'web.service.consul') as client:
            r = await client.get('/health', headers={'X-Request-ID': 'req-caller-123'})
        assert r.headers['X-Request-ID'] == 'req-caller-123'

    @pytest.mark.asyncio
    async def test_request_id_generated_when_invalid(self, app):
        async with _client(app, 'web.service.consul') as client:
            r = await client.get('/health', headers={'X-Request-ID': 'bad id!'})
        assert r.headers['X-Request-ID'] != 'bad id!'
        assert len(r.headers['X-Request-ID']) == 36


class TestRedirects:
    @pytest.mark.asyncio
    async def test_static_route(self, app):
        async with _client(app, f'grafana.{SUFFIX}') as client:
            r = await client.get('/dashboards')
        assert r.status_code == 307
        assert r.headers['location'] == 'https://grafana.example.com/'

    @pytest.mark.asyncio
    async def test_single_result_keeps_path_and_query(self, app, catalog):
        catalog.register('web', CatalogEntry('node1', ('https',), 21000))
        async with _client(app, 'web.service.consul:8080') as client:
            r = await client.get('/app/page?tab=2')
        assert r.status_code == 307
        assert r.headers['location'] == 'https://web.service.consul:21000/app/page?tab=2'

    @pytest.mark.asyncio
    async def test_non_get_methods_are_redirected(self, app, catalog):
        catalog.register('web', CatalogEntry('node1', (), 21000))
        async with _client(app, 'web.service.consul') as client:
            r = await client.post('/submit', content=b'x')
        assert r.status_code == 307
        assert r.headers['location'] == 'http://web.service.consul:21000/submit'

    @pytest.mark.asyncio
    async def test_nomad_ui(self, catalog):
        app = create_app(_settings(redirect_to_nomad_ui=True), catalog_client=catalog)
        async with _client(app, f'node1.{SUFFIX}') as client:
            r = await client.get('/')
        assert r.status_code == 307
        assert r.headers['location'] == (
            f'http://node1.{SUFFIX}:4646/ui/clients?search=node1.{SUFFIX}'
        )


class TestRenderedPages:
    @pytest.mark.asyncio
    async def test_multiple_results_listing(self, app, catalog):
        catalog.register('web', CatalogEntry('node1', ('https', 'api'), 8443))
        catalog.register('web', CatalogEntry('node2', (), 8080))
        async with _client(app, 'web.service.consul') as client:
            r = await client.get('/x')

        assert r.status_code == 200
        assert r.headers['content-type'].startswith('text/html')
        assert 'Consul service ports found for service <code>web</code> in Consul' in r.text
        assert f'href="https://node1.{SUFFIX}:8443/x"' in r.text
        assert f'node1.{SUFFIX} port 8443 (https, api)' in r.text
        assert f'href="http://node2.{SUFFIX}:8080/x"' in r.text
        assert 'http://web.service.consul:4646/ui/' in r.text
        assert 'http://web.service.consul:8500/ui/' in r.text

    @pytest.mark.asyncio
    async def test_no_results_with_port_type(self, app):
        async with _client(app, 'grpc.web.service.consul') as client:
            r = await client.get('/')
        assert r.status_code == 404
        assert (
            'No results found for service <code>web</code> and port type '
            '<code>grpc</code> in Consul'
        ) in r.text
        assert 'The hostname should be in one of these formats' in r.text

    @pytest.mark.asyncio
    async def test_parse_error_page(self, app):
        async with _client(app, '10.0.0.1') as client:
            r = await client.get('/')
        assert r.status_code == 200
        assert 'Could not parse hostname <code>10.0.0.1</code>' in r.text
        assert 'The hostname should be in one of these formats' in r.text
        assert 'Quick links' in r.text

    @pytest.mark.asyncio
    async def test_quick_links_use_configured_hosts(self, catalog):
        settings = _settings(
            nomad_ui_hostname='nomad.example.com',
            consul_ui_hostname='consul.example.com',
        )
        app = create_app(settings, catalog_client=catalog)
        async with _client(app, '10.0.0.1') as client:
            r = await client.get('/')
        assert 'http://nomad.example.com:4646/ui/' in r.text
        assert 'http://consul.example.com:8500/ui/' in r.text

    @pytest.mark.asyncio
    async def test_query_error_page(self, app, catalog):
        catalog.fail_with(ConsulUnavailableError('connection refused'))
        async with _client(app, 'web.service.consul') as client:
            r = await client.get('/')
        assert r.status_code == 500
        assert 'Error querying Consul for web.service.consul' in r.text
        assert 'connection refused' in r.text

    def test_markup_in_hostname_is_escaped(self):
        response = render_outcome(
            _request(), ParseError(hostname='<b>x</b>'), hostname='x', settings=_settings(),
        )
        body = response.body.decode()
        assert '<b>x</b>' not in body
        assert '&lt;b&gt;x&lt;/b&gt;' in body


def _request() -> Request:
    return Request({
        'type': 'http',
        'method': 'GET',
        'path': '/',
        'headers': [],
        'query_string': b'',
    })


_SAMPLES = {
    StaticRedirect: StaticRedirect(url='https://a/'),
    UiRedirect: UiRedirect(url='http://n:4646/ui/clients?search=n'),
    SingleRedirect: SingleRedirect(url='http://s:1/'),
    MultipleResults: MultipleResults(
        service_name='web',
        port_type='',
        entries=(ResultLink(url='http://n:1/', full_hostname='n', port=1, tags_display=''),),
    ),
    NoResults: NoResults(service_name='web', port_type=''),
    ParseError: ParseError(hostname='x'),
    QueryError: QueryError(hostname='x', error=ConsulUnavailableError('down')),
    UrlBuildError: UrlBuildError(hostname='x', error=ValueError('bad')),
}

_EXPECTED_STATUS = {
    StaticRedirect: 307,
    UiRedirect: 307,
    SingleRedirect: 307,
    MultipleResults: 200,
    NoResults: 404,
    ParseError: 200,
    QueryError: 500,
    UrlBuildError: 500,
}


class TestRenderOutcome:
    def test_samples_cover_every_outcome_type(self):
        assert set(_SAMPLES) == set(OUTCOME_TYPES)

    @pytest.mark.parametrize('outcome_type', OUTCOME_TYPES, ids=lambda t: t.__name__)
    def test_every_outcome_renders(self, outcome_type):
        response = render_outcome(
            _request(), _SAMPLES[outcome_type], hostname='x', settings=_settings(),
        )
        assert response.status_code == _EXPECTED_STATUS[outcome_type]

    @pytest.mark.parametrize('outcome_type', OUTCOME_TYPES, ids=lambda t: t.__name__)
    def test_every_outcome_is_documented(self, outcome_type):
        # dataclass() fills in the signature when a class has no docstring.
        assert not outcome_type.__doc__.startswith(f'{outcome_type.__name__}(')

    def test_unknown_outcome_is_rejected(self):
        with pytest.raises(TypeError, match='unhandled resolution outcome'):
            render_outcome(_request(), object(), hostname='x', settings=_settings())  # type: ignore[arg-type]
