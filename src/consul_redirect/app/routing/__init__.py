"""Hostname parsing, catalog result selection and redirect resolution."""

from .entries import CatalogEntry
from .hostname import NOT_A_SERVICE, ParsedAddress, parse_service_address, strip_port
from .outcomes import (
    OUTCOME_TYPES,
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
from .resolver import Resolver
from .selection import entry_precedes, order_entries
from .urls import InvalidRedirectURL, add_hostname_suffix, build_url_with_port

__all__ = [
    'CatalogEntry',
    'InvalidRedirectURL',
    'MultipleResults',
    'NOT_A_SERVICE',
    'NoResults',
    'OUTCOME_TYPES',
    'ParseError',
    'ParsedAddress',
    'QueryError',
    'ResolutionOutcome',
    'Resolver',
    'ResultLink',
    'SingleRedirect',
    'StaticRedirect',
    'UiRedirect',
    'UrlBuildError',
    'add_hostname_suffix',
    'build_url_with_port',
    'entry_precedes',
    'order_entries',
    'parse_service_address',
    'strip_port',
]
