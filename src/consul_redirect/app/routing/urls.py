"""Redirect URL construction."""

from __future__ import annotations

from starlette.datastructures import URL

# Nomad's HTTP API and web UI listen here on every client node.
NOMAD_UI_PORT = 4646
CONSUL_UI_PORT = 8500


class InvalidRedirectURL(ValueError):
    """Raised when the original request URL cannot be re-parsed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f'cannot build redirect from {url!r}: {reason}')


def build_url_with_port(
    hostname: str,
    original_url: URL | str,
    scheme: str,
    port: int,
) -> URL:
    """Return a copy of ``original_url`` pointing at ``hostname:port``.

    Path, query string and fragment are kept verbatim; only the scheme and
    network location change. The input is never modified.

    Raises:
        InvalidRedirectURL: If ``original_url`` cannot be parsed.
    """
    raw = str(original_url)
    try:
        cloned = URL(raw)
        return cloned.replace(scheme=scheme, netloc=f'{hostname}:{port}')
    except ValueError as exc:
        raise InvalidRedirectURL(raw, str(exc)) from exc


def add_hostname_suffix(hostname: str, suffix: str) -> str:
    """Qualify a node name with the cluster hostname suffix, if one is set."""
    if not suffix:
        return hostname
    return f'{hostname}.{suffix.removeprefix(".")}'
