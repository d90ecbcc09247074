"""Validation of loaded configuration values."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from pricehist.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from pricehist.core.config.settings import PriceHistConfig

KNOWN_PROVIDERS = frozenset({"quandl", "alpha_vantage"})


def _check_int(errors: dict[str, Any], name: str, value: Any, minimum: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        errors[name] = f"must be an integer >= {minimum}, got {value!r}"


def _check_positive(errors: dict[str, Any], name: str, value: Any) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
        errors[name] = f"must be a positive number, got {value!r}"


def _check_url(errors: dict[str, Any], name: str, value: Any) -> None:
    parsed = urlparse(value) if isinstance(value, str) else None
    if parsed is None or parsed.scheme not in {"http", "https"} or not parsed.netloc:
        errors[name] = f"must be an http(s) URL, got {value!r}"


def validate_config(config: PriceHistConfig) -> PriceHistConfig:
    """Check every field and raise a single :class:`ConfigurationError` listing all failures."""

    errors: dict[str, Any] = {}
    retrieval = config.retrieval

    _check_int(errors, "retrieval.max_retries", retrieval.max_retries, 1)
    _check_int(errors, "retrieval.retry_backoff_ms", retrieval.retry_backoff_ms, 0)
    _check_positive(errors, "retrieval.max_seconds_per_request", retrieval.max_seconds_per_request)
    _check_int(errors, "retrieval.max_concurrent_connections", retrieval.max_concurrent_connections, 1)
    _check_int(errors, "retrieval.max_connections_per_second", retrieval.max_connections_per_second, 1)
    if retrieval.max_months_per_request is not None:
        _check_int(errors, "retrieval.max_months_per_request", retrieval.max_months_per_request, 1)
    _check_positive(errors, "retrieval.throttle_clean_interval", retrieval.throttle_clean_interval)
    _check_positive(errors, "retrieval.throttle_window", retrieval.throttle_window)

    if config.provider.name not in KNOWN_PROVIDERS:
        errors["provider.name"] = f"must be one of {sorted(KNOWN_PROVIDERS)}, got {config.provider.name!r}"
    if config.provider.endpoint is not None:
        _check_url(errors, "provider.endpoint", config.provider.endpoint)
    _check_positive(errors, "provider.timeout", config.provider.timeout)

    _check_int(errors, "storage.threads", config.storage.threads, 1)

    if errors:
        raise ConfigurationError(
            f"Invalid configuration: {len(errors)} field(s) failed validation",
            validation_errors=errors,
        )
    return config


__all__ = ["KNOWN_PROVIDERS", "validate_config"]
