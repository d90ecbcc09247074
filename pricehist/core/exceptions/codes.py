"""错误代码定义."""

from enum import Enum


class ErrorCode(str, Enum):
    """pricehist 错误代码."""

    GENERAL_ERROR = "GENERAL_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    RETRIEVAL_ERROR = "RETRIEVAL_ERROR"
    RETRIES_EXHAUSTED = "RETRIES_EXHAUSTED"
    RETRIEVAL_TIMEOUT = "RETRIEVAL_TIMEOUT"
    PENDING_REQUESTS_REMAIN = "PENDING_REQUESTS_REMAIN"
    RESPONSE_PARSE_ERROR = "RESPONSE_PARSE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


__all__ = ["ErrorCode"]
