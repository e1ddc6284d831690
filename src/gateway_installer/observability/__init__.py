"""Observability helpers: JSON-lines logging and structlog routing."""

from gateway_installer.observability.logging import (
    LoggingConfig,
    StructuredLoggingHandle,
    build_redactor,
    configure_structlog,
    get_active_logging_handle,
    mask_address,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "StructuredLoggingHandle",
    "build_redactor",
    "configure_structlog",
    "get_active_logging_handle",
    "mask_address",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
