"""配置管理模块 - 处理pricehist的配置"""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from pricehist.core.config.validation import validate_config
from pricehist.core.exceptions import ConfigurationError

DEFAULT_HOME = Path.home() / ".pricehist"


@dataclass
class RetrievalConfig:
    """获取流水线配置"""

    max_retries: int = 3  # 每个请求的总尝试次数
    retry_backoff_ms: int = 500  # 第n次失败后等待 n * retry_backoff_ms
    max_seconds_per_request: float = 30.0
    max_concurrent_connections: int = 4
    max_connections_per_second: int = 5
    max_months_per_request: int | None = 12
    throttle_clean_interval: float = 1.0
    throttle_window: float = 1.0


@dataclass
class ProviderConfig:
    """提供商配置"""

    name: str = "quandl"
    endpoint: str | None = None  # 为空时使用提供商默认地址
    api_key: str | None = None
    timeout: float = 30.0


@dataclass
class StorageConfig:
    """存储配置"""

    db_path: str = str(DEFAULT_HOME / "pricehist.duckdb")
    threads: int = 1


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    file: str | None = None


@dataclass
class PriceHistConfig:
    """pricehist主配置"""

    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "PriceHistConfig":
        """从字典创建配置"""
        try:
            return cls(
                retrieval=RetrievalConfig(**config_dict.get("retrieval", {})),
                provider=ProviderConfig(**config_dict.get("provider", {})),
                storage=StorageConfig(**config_dict.get("storage", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "retrieval": asdict(self.retrieval),
            "provider": asdict(self.provider),
            "storage": asdict(self.storage),
            "logging": asdict(self.logging),
        }


def _deep_update(target: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """深度更新字典"""
    for key, value in updates.items():
        if isinstance(value, dict):
            target[key] = _deep_update(target.get(key, {}), value)
        else:
            target[key] = value
    return target


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None, use_env: bool = True):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
            use_env: 是否合并 PRICEHIST_* 环境变量
        """
        self.config_path = config_path or DEFAULT_HOME / "config.toml"
        config_dict = self._load_file()
        if use_env:
            _deep_update(config_dict, load_config_from_env())
        self.config = validate_config(PriceHistConfig.from_dict(config_dict))

    def _load_file(self) -> dict[str, Any]:
        """加载配置文件, 不存在时返回空字典"""
        if not self.config_path.exists():
            logger.debug("Config file {} not found, using defaults", self.config_path)
            return {}

        try:
            with open(self.config_path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Config file {self.config_path} is not valid TOML: {e}") from e

    def get_config(self) -> PriceHistConfig:
        """获取当前配置"""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """更新配置并重新校验"""
        config_dict = _deep_update(self.config.to_dict(), updates)
        config = PriceHistConfig.from_dict(config_dict)
        validate_config(config)
        self.config = config


def get_default_config() -> PriceHistConfig:
    """获取默认配置"""
    return PriceHistConfig()


_ENV_FIELDS: dict[str, tuple[str, str, type]] = {
    "PRICEHIST_MAX_RETRIES": ("retrieval", "max_retries", int),
    "PRICEHIST_RETRY_BACKOFF_MS": ("retrieval", "retry_backoff_ms", int),
    "PRICEHIST_MAX_SECONDS_PER_REQUEST": ("retrieval", "max_seconds_per_request", float),
    "PRICEHIST_MAX_CONCURRENT_CONNECTIONS": ("retrieval", "max_concurrent_connections", int),
    "PRICEHIST_MAX_CONNECTIONS_PER_SECOND": ("retrieval", "max_connections_per_second", int),
    "PRICEHIST_MAX_MONTHS_PER_REQUEST": ("retrieval", "max_months_per_request", int),
    "PRICEHIST_PROVIDER": ("provider", "name", str),
    "PRICEHIST_PROVIDER_ENDPOINT": ("provider", "endpoint", str),
    "PRICEHIST_PROVIDER_API_KEY": ("provider", "api_key", str),
    "PRICEHIST_PROVIDER_TIMEOUT": ("provider", "timeout", float),
    "PRICEHIST_DB_PATH": ("storage", "db_path", str),
    "PRICEHIST_LOGGING_LEVEL": ("logging", "level", str),
    "PRICEHIST_LOGGING_FILE": ("logging", "file", str),
}


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    for variable, (section, key, converter) in _ENV_FIELDS.items():
        raw = os.getenv(variable)
        if raw is None:
            continue
        try:
            config.setdefault(section, {})[key] = converter(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Environment variable {variable} is not a valid {converter.__name__}",
                validation_errors={variable: raw},
            ) from e

    return config
