"""Redirector configuration settings.

RedirectSettings is the single configuration object accepted by create_app()
and Resolver. It is a plain frozen dataclass (not env-coupled) so tests can
inject config without touching os.environ; ``from_env()`` is the production
factory and the CLI layers its flags on top.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

_DEFAULT_CONSUL_ADDR = 'http://127.0.0.1:8500'
_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_LOG_LEVELS = frozenset({'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'})
_LOG_FORMATS = frozenset({'json', 'console'})


class SettingsError(ValueError):
    """Raised when a configuration value cannot be parsed."""


@dataclass(frozen=True, slots=True)
class RedirectSettings:
    """Configuration for the redirect service.

    All fields have defaults suitable for running next to a local Consul agent.
    """

    # ── Listener ───────────────────────────────────────────────────
    port: int = 80
    """HTTP port the server binds to."""

    # ── Nomad / Consul UI ──────────────────────────────────────────
    nomad_ui_hostname: str = ''
    """Hostname linked to for the Nomad UI. Empty means the request hostname."""

    consul_ui_hostname: str = ''
    """Hostname linked to for the Consul UI. Empty means the request hostname."""

    redirect_to_nomad_ui: bool = False
    """Send node hostnames (``*<hostname_suffix>``) to the Nomad UI."""

    # ── Routing ────────────────────────────────────────────────────
    hostname_suffix: str = ''
    """DNS suffix of cluster nodes, e.g. ``node.example.com``."""

    custom_routes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    """Immutable mapping of hostname -> redirect URL, checked before Consul."""

    # ── Consul ─────────────────────────────────────────────────────
    consul_http_addr: str = _DEFAULT_CONSUL_ADDR
    """Base URL of the Consul HTTP API."""

    consul_http_token: str = ''
    """ACL token sent as X-Consul-Token. Never log this."""

    consul_timeout_seconds: float = 10.0

    # ── Logging ────────────────────────────────────────────────────
    log_level: str = 'INFO'

    log_format: str = 'json'
    """'json' for JSON lines, 'console' for human-readable output."""

    def validate(self) -> list[str]:
        """Return a list of configuration errors. Empty means valid."""
        errors: list[str] = []
        if not 0 < self.port < 65536:
            errors.append(f'port must be between 1 and 65535, got {self.port}')
        if self.consul_timeout_seconds <= 0:
            errors.append(
                f'consul_timeout_seconds must be positive, got {self.consul_timeout_seconds}'
            )
        if not self.consul_http_addr.startswith(('http://', 'https://')):
            errors.append(f'consul_http_addr must be an http(s) URL, got {self.consul_http_addr!r}')
        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f'log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}')
        if self.log_format not in _LOG_FORMATS:
            errors.append(f'log_format must be one of {sorted(_LOG_FORMATS)}, got {self.log_format!r}')
        return errors

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> RedirectSettings:
        """Build settings from environment variables.

        Raises:
            SettingsError: If a value cannot be parsed.
        """
        if env is None:
            env = dict(os.environ)

        return cls(
            port=_parse_int(env.get('PORT', ''), 'PORT', default=80),
            nomad_ui_hostname=env.get('NOMAD_UI_HOSTNAME', '').strip(),
            consul_ui_hostname=env.get('CONSUL_UI_HOSTNAME', '').strip(),
            redirect_to_nomad_ui=parse_bool(env.get('REDIRECT_TO_NOMAD_UI', '')),
            hostname_suffix=env.get('HOSTNAME_SUFFIX', '').strip(),
            custom_routes=parse_custom_routes(env.get('CUSTOM_ROUTES', '')),
            consul_http_addr=normalize_consul_addr(
                env.get('CONSUL_HTTP_ADDR', ''),
                use_ssl=parse_bool(env.get('CONSUL_HTTP_SSL', '')),
            ),
            consul_http_token=env.get('CONSUL_HTTP_TOKEN', '').strip(),
            consul_timeout_seconds=_parse_float(
                env.get('CONSUL_TIMEOUT_SECONDS', ''), 'CONSUL_TIMEOUT_SECONDS', default=10.0,
            ),
            log_level=env.get('LOG_LEVEL', '').strip() or 'INFO',
            log_format=env.get('LOG_FORMAT', '').strip().lower() or 'json',
        )


# ── Parsing helpers ─────────────────────────────────────────────────


def parse_custom_routes(raw: str) -> Mapping[str, str]:
    """Parse the custom routes JSON object into an immutable mapping.

    ``""`` and ``"{}"`` yield an empty table.

    Raises:
        SettingsError: If ``raw`` is not a JSON object of string to string.
    """
    raw = raw.strip()
    if raw in ('', '{}'):
        return MappingProxyType({})

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SettingsError(f'custom routes are not valid JSON: {exc}') from exc

    if not isinstance(data, dict):
        raise SettingsError(
            f'custom routes must be a JSON object, got {type(data).__name__}'
        )
    for host, url in data.items():
        if not isinstance(url, str):
            raise SettingsError(f'custom route for {host!r} must be a string URL')

    return MappingProxyType(dict(data))


def normalize_consul_addr(addr: str, *, use_ssl: bool = False) -> str:
    """Turn a ``CONSUL_HTTP_ADDR`` value into a base URL without trailing slash."""
    addr = addr.strip()
    if not addr:
        return _DEFAULT_CONSUL_ADDR
    if '://' not in addr:
        addr = f'{"https" if use_ssl else "http"}://{addr}'
    return addr.rstrip('/')


def parse_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUTHY


def _parse_int(raw: str, name: str, *, default: int) -> int:
    raw = raw.strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise SettingsError(f'{name} must be an integer, got {raw!r}') from exc


def _parse_float(raw: str, name: str, *, default: float) -> float:
    raw = raw.strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise SettingsError(f'{name} must be a number, got {raw!r}') from exc
