"""DuckDB storage."""

from pricehist.core.data.storage.duckdb_factory import DuckDBFactory, DuckDBFactoryConfig, storage_errors
from pricehist.core.data.storage.schema import TABLES, ensure_schema

__all__ = ["DuckDBFactory", "DuckDBFactoryConfig", "TABLES", "ensure_schema", "storage_errors"]
