"""flymap Logging — stdlib-backed structlog loggers and their output setup."""

from flymap.logging.structlog_adapter import (
    ROOT_LOGGER,
    StructlogAdapter,
    configure_logging,
    get_logger,
)

__all__ = ["ROOT_LOGGER", "StructlogAdapter", "configure_logging", "get_logger"]
