"""Python client for the Apify API."""

from .client import ApifyClient, AsyncApifyClient
from .exceptions import (
    ApifyCancelledError,
    ApifyClientError,
    ApifyInvalidParameterError,
    ApifyRequestFailedError,
)
from .models import KeyValueStoreKeys, KeyValueStoreRecord, PaginationList, RawResponse
from .request_options import CallOptions, ClientOptions, Endpoint
from .statistics import Statistics
from .version import __version__

__all__ = [
    "ApifyCancelledError",
    "ApifyClient",
    "ApifyClientError",
    "ApifyInvalidParameterError",
    "ApifyRequestFailedError",
    "AsyncApifyClient",
    "CallOptions",
    "ClientOptions",
    "Endpoint",
    "KeyValueStoreKeys",
    "KeyValueStoreRecord",
    "PaginationList",
    "RawResponse",
    "Statistics",
    "__version__",
]
