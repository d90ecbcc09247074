"""Exception handling module."""

from pricehist.core.exceptions.base import (
    ConfigurationError,
    ExhaustedRetriesError,
    NetworkError,
    PendingRequestsRemainError,
    PriceHistError,
    ProviderError,
    RateLimitError,
    ResponseParseError,
    RetrievalError,
    RetrievalTimeoutError,
    StorageError,
)
from pricehist.core.exceptions.codes import ErrorCode

__all__ = [
    "PriceHistError",
    "ProviderError",
    "NetworkError",
    "RateLimitError",
    "RetrievalError",
    "ExhaustedRetriesError",
    "RetrievalTimeoutError",
    "PendingRequestsRemainError",
    "ResponseParseError",
    "ConfigurationError",
    "StorageError",
    "ErrorCode",
]
