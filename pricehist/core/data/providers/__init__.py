"""数据提供商."""

from pricehist.core.data.providers.alpha_vantage import AlphaVantageProvider
from pricehist.core.data.providers.base import EquityProvider
from pricehist.core.data.providers.factory import PROVIDERS, create_provider
from pricehist.core.data.providers.quandl import QuandlProvider

__all__ = ["PROVIDERS", "AlphaVantageProvider", "EquityProvider", "QuandlProvider", "create_provider"]
