"""Storage, repositories and providers."""
