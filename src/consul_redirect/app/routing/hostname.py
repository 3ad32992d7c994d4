"""Consul service address parsing.

Accepted hostname shapes::

    ServiceName.service.consul
    PortName.ServiceName.service.consul
    ServiceName.service.DatacenterName.consul
    PortName.ServiceName.service.DatacenterName.consul

SRV-style leading underscores (``_http._web.service.consul``) are tolerated.
The datacenter segment is ignored; queries go to the agent's datacenter.
"""

from __future__ import annotations

from typing import NamedTuple

_SERVICE_MARKER = '.service.'


class ParsedAddress(NamedTuple):
    """Service name and optional port type decoded from a hostname.

    An empty ``service_name`` means the hostname is not a service address.
    """

    service_name: str
    port_type: str

    @property
    def is_valid(self) -> bool:
        return bool(self.service_name)


NOT_A_SERVICE = ParsedAddress(service_name='', port_type='')


def parse_service_address(hostname: str) -> ParsedAddress:
    """Decode ``hostname`` into a ``ParsedAddress``.

    Everything before the first ``.service.`` is the candidate segment.
    When the candidate holds a dot it is read as ``PortName.ServiceName``.
    If the part after that first dot still holds a dot, the hostname was an
    IP address or a deeper DNS name and ``NOT_A_SERVICE`` is returned.
    """
    candidate = hostname.split(_SERVICE_MARKER, 1)[0]

    if '.' not in candidate:
        return ParsedAddress(service_name=candidate, port_type='')

    head, rest = candidate.split('.', 1)

    # don't parse IP addresses
    if '.' in rest:
        return NOT_A_SERVICE

    return ParsedAddress(
        service_name=rest.removeprefix('_'),
        port_type=head.removeprefix('_'),
    )


def strip_port(host: str) -> str:
    """Remove a ``:port`` suffix from a ``Host`` header value.

    Handles IPv6 bracket notation (``[::1]:8080``).
    """
    if host.startswith('['):
        bracket_end = host.find(']')
        if bracket_end >= 0:
            return host[1:bracket_end]
        return host.strip('[]')

    return host.split(':', 1)[0]
