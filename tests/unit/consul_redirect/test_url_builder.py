"""Tests for redirect URL construction and scheme inference."""

import pytest
from starlette.datastructures import URL

from consul_redirect.app.routing.entries import CatalogEntry
from consul_redirect.app.routing.urls import (
    InvalidRedirectURL,
    add_hostname_suffix,
    build_url_with_port,
)


class TestBuildUrlWithPort:
    def test_replaces_scheme_and_host_keeps_path_and_query(self):
        url = build_url_with_port('h', URL('http://web.service.consul/x?q=1'), 'https', 8080)
        assert url.scheme == 'https'
        assert url.netloc == 'h:8080'
        assert url.path == '/x'
        assert url.query == 'q=1'

    def test_accepts_plain_string(self):
        url = build_url_with_port('node1', 'http://a.service.consul:80/', 'http', 21000)
        assert str(url) == 'http://node1:21000/'

    def test_keeps_fragment(self):
        url = build_url_with_port('h', 'http://x/p#frag', 'http', 1)
        assert url.fragment == 'frag'

    def test_keeps_default_port_explicit(self):
        url = build_url_with_port('h', 'https://x/', 'http', 80)
        assert str(url) == 'http://h:80/'

    def test_does_not_modify_original(self):
        original = URL('http://web.service.consul:81/a?b=c')
        build_url_with_port('other', original, 'https', 9999)
        assert str(original) == 'http://web.service.consul:81/a?b=c'

    def test_unparseable_url_raises(self):
        with pytest.raises(InvalidRedirectURL) as exc_info:
            build_url_with_port('h', 'http://[::1/x', 'http', 80)
        assert exc_info.value.url == 'http://[::1/x'
        assert isinstance(exc_info.value, ValueError)


class TestAddHostnameSuffix:
    def test_no_suffix(self):
        assert add_hostname_suffix('node1', '') == 'node1'

    def test_suffix_appended_with_dot(self):
        assert add_hostname_suffix('node1', 'node.example.com') == 'node1.node.example.com'

    def test_leading_dot_in_suffix_is_not_doubled(self):
        assert add_hostname_suffix('node1', '.node.example.com') == 'node1.node.example.com'


def _entry(*tags: str, port: int = 8080) -> CatalogEntry:
    return CatalogEntry(hostname='node1', tags=tuple(tags), port=port)


class TestGuessScheme:
    def test_default_is_http(self):
        assert _entry().guess_scheme() == 'http'

    def test_unrelated_tags_default_to_http(self):
        assert _entry('traefik', 'v2').guess_scheme() == 'http'

    def test_https_tag(self):
        assert _entry('https').guess_scheme() == 'https'

    def test_case_insensitive(self):
        assert _entry('HTTPS').guess_scheme() == 'https'
        assert _entry('Http').guess_scheme() == 'http'

    def test_first_matching_tag_wins(self):
        assert _entry('http', 'https').guess_scheme() == 'http'
        assert _entry('metrics', 'https', 'http').guess_scheme() == 'https'

    def test_build_url_uses_inferred_scheme_and_own_port(self):
        url = _entry('https', port=8443).build_url('web.service.consul', 'http://web.service.consul/')
        assert str(url) == 'https://web.service.consul:8443/'


class TestTagsDisplay:
    def test_no_tags(self):
        assert _entry().tags_display == ''

    def test_tags_joined_in_order(self):
        assert _entry('https', 'api').tags_display == ' (https, api)'
