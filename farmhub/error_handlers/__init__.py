"""
Unified Error Handling System

Exception hierarchy and logging helpers shared by the schedule engine.

Usage:
    from farmhub.error_handlers import ConfigurationException, refresh_logger

    if not valid:
        raise ConfigurationException('Invalid timezone')
"""
from .exceptions import (
    AppException,
    ValidationException,
    ConfigurationException,
    SnapshotFetchException
)
from .logging import (
    setup_logging,
    log_refresh_operation,
    handle_refresh_error,
    RefreshLogger,
    refresh_logger
)


__all__ = [
    # Exceptions
    'AppException',
    'ValidationException',
    'ConfigurationException',
    'SnapshotFetchException',
    # Logging
    'setup_logging',
    'log_refresh_operation',
    'handle_refresh_error',
    'RefreshLogger',
    'refresh_logger',
]
