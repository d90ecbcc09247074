"""数据提供商抽象基类."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from types import TracebackType
from typing import Any

import httpx

from pricehist.core.exceptions import NetworkError, ResponseParseError
from pricehist.core.logging import get_logger
from pricehist.core.models import TradingDayPrices
from pricehist.core.patterns.throttle import Throttle

logger = get_logger(__name__)


class EquityProvider(ABC):
    """按日期区间获取股票日线价格的提供商.

    Subclasses build the request and parse the payload; the shared
    ``_get_json`` admits the call through the throttle and maps transport
    failures onto the retryable error types.
    """

    name: str = "provider"
    BASE_URL: str = ""

    def __init__(
        self,
        endpoint: str | None = None,
        api_key: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = (endpoint or self.BASE_URL).rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    @abstractmethod
    async def fetch(
        self,
        dataset: str,
        ticker_symbol: str,
        inclusive_start: date,
        exclusive_end: date,
        throttle: Throttle,
    ) -> list[TradingDayPrices]:
        """获取 ``[inclusive_start, exclusive_end)`` 之间的日线价格.

        Raises:
            ProviderError: 暂时性错误, 可以重试
            RetrievalError: 不可恢复的错误
        """

    async def _get_json(self, url: str, params: dict[str, Any], throttle: Throttle) -> Any:
        await throttle.add()
        logger.info("Requesting provider data", provider=self.name, url=url)

        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise NetworkError(f"HTTP request to {self.name} failed: {e}", self.name) from e

        if response.status_code != httpx.codes.OK:
            raise NetworkError(
                f"{self.name} responded with HTTP {response.status_code}",
                self.name,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"{self.name} returned a body that is not JSON", self.name) from e

    async def close(self) -> None:
        """关闭自建的HTTP客户端, 注入的客户端由调用方负责关闭."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> EquityProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


__all__ = ["EquityProvider"]
