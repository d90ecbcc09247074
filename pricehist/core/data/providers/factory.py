"""根据配置创建数据提供商."""

import httpx

from pricehist.core.config import ProviderConfig
from pricehist.core.data.providers.alpha_vantage import AlphaVantageProvider
from pricehist.core.data.providers.base import EquityProvider
from pricehist.core.data.providers.quandl import QuandlProvider
from pricehist.core.exceptions import ConfigurationError

PROVIDERS: dict[str, type[EquityProvider]] = {
    QuandlProvider.name: QuandlProvider,
    AlphaVantageProvider.name: AlphaVantageProvider,
}


def create_provider(config: ProviderConfig, client: httpx.AsyncClient | None = None) -> EquityProvider:
    """按名称创建提供商实例."""
    provider_class = PROVIDERS.get(config.name)
    if provider_class is None:
        raise ConfigurationError(
            f"Unknown provider: {config.name}",
            validation_errors={"provider.name": config.name},
        )
    return provider_class(config.endpoint, api_key=config.api_key, timeout=config.timeout, client=client)


__all__ = ["PROVIDERS", "create_provider"]
