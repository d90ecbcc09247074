"""pricehist核心异常类."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .codes import ErrorCode

if TYPE_CHECKING:
    from pricehist.core.models.requests import RetrievalRequest


class PriceHistError(Exception):
    """pricehist基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ProviderError(PriceHistError):
    """数据提供商的暂时性异常，执行器会重试."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = ErrorCode.PROVIDER_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        self.provider_name = provider_name


class NetworkError(ProviderError):
    """网络异常 (非200状态码或传输失败)."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, ErrorCode.NETWORK_ERROR.value, super_details)
        self.status_code = status_code


class RateLimitError(ProviderError):
    """速率限制异常."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        retry_after: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if retry_after is not None:
            super_details["retry_after"] = retry_after
        super().__init__(message, provider_name, ErrorCode.RATE_LIMIT_ERROR.value, super_details)
        self.retry_after = retry_after


class RetrievalError(PriceHistError):
    """批量获取无法完成时向调用方抛出的异常."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.RETRIEVAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        # 失败前已完成的请求, 由执行器填充
        self.fulfilled: list[RetrievalRequest] = []


class ExhaustedRetriesError(RetrievalError):
    """单个请求在重试耗尽后仍然失败."""

    def __init__(
        self,
        message: str,
        request: RetrievalRequest,
        attempts: int,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["request"] = str(request)
        super_details["attempts"] = attempts
        super().__init__(message, ErrorCode.RETRIES_EXHAUSTED.value, super_details)
        self.request = request
        self.attempts = attempts


class RetrievalTimeoutError(RetrievalError):
    """工作池未能在超时时间内完成."""

    def __init__(
        self,
        message: str,
        timeout_seconds: float,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["timeout_seconds"] = timeout_seconds
        super().__init__(message, ErrorCode.RETRIEVAL_TIMEOUT.value, super_details)
        self.timeout_seconds = timeout_seconds


class PendingRequestsRemainError(RetrievalError):
    """执行结束后仍有待处理请求 (完整性校验失败)."""

    def __init__(
        self,
        message: str,
        remaining: list[RetrievalRequest],
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["remaining"] = [str(request) for request in remaining]
        super().__init__(message, ErrorCode.PENDING_REQUESTS_REMAIN.value, super_details)
        self.remaining = remaining


class ResponseParseError(RetrievalError):
    """提供商响应无法解析, 不可恢复."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["provider"] = provider_name
        super().__init__(message, ErrorCode.RESPONSE_PARSE_ERROR.value, super_details)
        self.provider_name = provider_name


class ConfigurationError(PriceHistError):
    """配置校验失败."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR.value, super_details)
        self.validation_errors = validation_errors or {}


class StorageError(PriceHistError):
    """存储相关异常."""

    def __init__(
        self,
        message: str,
        table: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if table:
            super_details["table"] = table
        super().__init__(message, ErrorCode.STORAGE_ERROR.value, super_details)
        self.table = table
