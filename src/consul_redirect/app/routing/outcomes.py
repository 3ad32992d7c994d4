"""Resolution outcomes handed from the resolver to the HTTP layer.

``ResolutionOutcome`` is a closed union. The renderer must handle every
member; ``OUTCOME_TYPES`` lists them so that coverage can be checked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


def _port_type_suffix(port_type: str) -> str:
    if not port_type:
        return ''
    return f' and port type {port_type}'


@dataclass(frozen=True, slots=True)
class StaticRedirect:
    """Hostname matched a configured custom route."""

    kind: ClassVar[str] = 'static_redirect'

    url: str


@dataclass(frozen=True, slots=True)
class UiRedirect:
    """Hostname is a cluster node; send the user to the Nomad UI."""

    kind: ClassVar[str] = 'ui_redirect'

    url: str


@dataclass(frozen=True, slots=True)
class SingleRedirect:
    """Exactly one catalog entry matched."""

    kind: ClassVar[str] = 'single_redirect'

    url: str


@dataclass(frozen=True, slots=True)
class ResultLink:
    """One row of a multiple-results listing."""

    url: str
    full_hostname: str
    port: int
    tags_display: str


@dataclass(frozen=True, slots=True)
class MultipleResults:
    """Several catalog entries matched; the user picks one."""

    kind: ClassVar[str] = 'multiple_results'

    service_name: str
    port_type: str
    entries: tuple[ResultLink, ...]

    @property
    def port_type_suffix(self) -> str:
        return _port_type_suffix(self.port_type)


@dataclass(frozen=True, slots=True)
class NoResults:
    """The catalog has no entry for the service and port type."""

    kind: ClassVar[str] = 'no_results'

    service_name: str
    port_type: str

    @property
    def port_type_suffix(self) -> str:
        return _port_type_suffix(self.port_type)


@dataclass(frozen=True, slots=True)
class ParseError:
    """Hostname is not a Consul service address."""

    kind: ClassVar[str] = 'parse_error'

    hostname: str


@dataclass(frozen=True, slots=True)
class QueryError:
    """The catalog could not be queried."""

    kind: ClassVar[str] = 'query_error'

    hostname: str
    error: Exception


@dataclass(frozen=True, slots=True)
class UrlBuildError:
    """The request URL could not be rewritten."""

    kind: ClassVar[str] = 'url_build_error'

    hostname: str
    error: Exception


ResolutionOutcome = Union[
    StaticRedirect,
    UiRedirect,
    SingleRedirect,
    MultipleResults,
    NoResults,
    ParseError,
    QueryError,
    UrlBuildError,
]

OUTCOME_TYPES: tuple[type, ...] = (
    StaticRedirect,
    UiRedirect,
    SingleRedirect,
    MultipleResults,
    NoResults,
    ParseError,
    QueryError,
    UrlBuildError,
)
