"""Exit codes shared by CLI commands."""

SYSTEM_EXIT_CODE = 1
CONFIGURATION_EXIT_CODE = 2
RETRIEVAL_EXIT_CODE = 3

__all__ = ["CONFIGURATION_EXIT_CODE", "RETRIEVAL_EXIT_CODE", "SYSTEM_EXIT_CODE"]
