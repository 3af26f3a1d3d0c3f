"""Bobuild API client.

Typed access to a Bobuild JSON/REST API:
- Authenticated GET/POST with bearer tokens
- Decoding into caller-specified types (pydantic)
- Transparent aggregation of paginated list endpoints
- Insert / insert-multiple / delete envelopes

Python Version: 3.10+ required
"""

import logging

from .__version__ import __version__
from .client import (
    APIStatusError,
    BobuildClient,
    BobuildClientError,
    DecodeError,
    NetworkError,
    PaginationError,
    RequestBuildError,
    RequestTimeoutError,
)
from .config import BobuildConfig, get_config, reset_config
from .logging_config import (
    StructuredFormatter,
    TextFormatter,
    build_formatter,
    configure_logging,
)
from .models import (
    DeleteResponse,
    InsertMultipleResponse,
    InsertResponse,
    ListEnvelope,
    MutationResponse,
)
from .urls import API_PREFIX, make_url, with_page

# Library default: silent until the application calls configure_logging()
logging.getLogger("bobuild").addHandler(logging.NullHandler())

__all__ = [
    "API_PREFIX",
    "APIStatusError",
    "BobuildClient",
    "BobuildClientError",
    "BobuildConfig",
    "DecodeError",
    "DeleteResponse",
    "InsertMultipleResponse",
    "InsertResponse",
    "ListEnvelope",
    "MutationResponse",
    "NetworkError",
    "PaginationError",
    "RequestBuildError",
    "RequestTimeoutError",
    "StructuredFormatter",
    "TextFormatter",
    "__version__",
    "build_formatter",
    "configure_logging",
    "get_config",
    "make_url",
    "reset_config",
    "with_page",
]
