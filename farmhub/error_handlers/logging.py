"""
Logging utilities for the farm hub schedule engine
Provides centralized logging setup and refresh error bookkeeping
"""
import logging
import traceback
from datetime import datetime, timezone
import os


def _utcnow():
    return datetime.now(timezone.utc)


def setup_logging(config_class):
    """Configure package logging from a config class"""
    log_level = getattr(logging, str(getattr(config_class, 'LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    log_file = getattr(config_class, 'LOG_FILE', 'logs/farmhub.log')

    # Make log file path absolute if it's not
    if not os.path.isabs(log_file):
        basedir = os.path.abspath(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
        log_file = os.path.join(basedir, log_file)

    log_dir = os.path.dirname(log_file)
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    package_logger = logging.getLogger('farmhub')
    package_logger.setLevel(log_level)
    package_logger.addHandler(file_handler)
    package_logger.addHandler(console_handler)

    return package_logger


def log_refresh_operation(operation_type, details=None):
    """Log snapshot refresh operations"""
    logger = logging.getLogger('farmhub.refresh')
    timestamp = _utcnow().isoformat()

    log_message = f"REFRESH [{operation_type}] at {timestamp}"
    if details:
        log_message += f" - {details}"

    logger.info(log_message)


def handle_refresh_error(operation, error, context=None):
    """Centralized refresh error handling"""
    logger = logging.getLogger('farmhub.refresh')
    error_id = _utcnow().strftime('%Y%m%d_%H%M%S_%f')

    log_message = f"REFRESH ERROR [{error_id}] in {operation}: {str(error)}"
    if context:
        log_message += f" | Context: {context}"

    logger.error(log_message)
    logger.debug(f"REFRESH ERROR TRACEBACK [{error_id}]: {traceback.format_exc()}")

    return {
        'error_id': error_id,
        'operation': operation,
        'error_message': str(error),
        'timestamp': _utcnow().isoformat()
    }


class RefreshLogger:
    """Specialized logger for snapshot refreshes and clock ticks"""

    def __init__(self, name='farmhub.refresh'):
        self.logger = logging.getLogger(name)

    def refresh_started(self, operation, details=None):
        """Log refresh start"""
        message = f"Started: {operation}"
        if details:
            message += f" | {details}"
        self.logger.info(message)

    def refresh_completed(self, operation, stats=None):
        """Log refresh completion"""
        message = f"Completed: {operation}"
        if stats:
            message += f" | Stats: {stats}"
        self.logger.info(message)

    def refresh_failed(self, operation, error, context=None):
        """Log refresh failure"""
        error_details = handle_refresh_error(operation, error, context)
        return error_details['error_id']

    def refresh_warning(self, operation, message):
        """Log refresh warnings"""
        self.logger.warning(f"{operation}: {message}")


# Global refresh logger instance
refresh_logger = RefreshLogger()
