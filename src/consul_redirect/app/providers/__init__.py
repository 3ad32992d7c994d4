"""Service catalog providers."""

from ..errors import ConsulAPIError, ConsulTimeoutError, ConsulUnavailableError
from .consul_client import ConsulCatalogClient

__all__ = [
    "ConsulAPIError",
    "ConsulCatalogClient",
    "ConsulTimeoutError",
    "ConsulUnavailableError",
]
