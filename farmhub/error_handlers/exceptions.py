"""
Custom exception hierarchy for the schedule engine

The engine itself degrades malformed cell and time text to "nothing to show",
so these exceptions only surface at the edges: configuration and the snapshot
handed over by the persistence collaborator.

Usage:
    from farmhub.error_handlers.exceptions import ValidationException

    def load(payload):
        if not isinstance(payload, dict):
            raise ValidationException('Snapshot payload must be a mapping')

Exception Hierarchy:
    AppException (base)
    ├── ValidationException (400)
    ├── ConfigurationException (500)
    └── SnapshotFetchException (502)
"""
from typing import Dict, Any, Optional


class AppException(Exception):
    """
    Base exception for all schedule engine errors

    Attributes:
        status_code: HTTP-style status code for the error
        error_type: String identifier for the error type
        message: Human-readable error message
        details: Additional context about the error
    """
    status_code = 500
    error_type = 'ApplicationError'

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to JSON-serializable dictionary

        Returns:
            Dictionary suitable for handing to the rendering layer
        """
        result = {
            'error': self.error_type,
            'message': self.message,
            'status_code': self.status_code
        }

        if self.details:
            result.update(self.details)

        return result

    def __str__(self) -> str:
        return f"{self.error_type}: {self.message}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}('{self.message}', status_code={self.status_code})>"


class ValidationException(AppException):
    """
    Validation errors (400)

    Raised when a snapshot payload does not have the expected shape at all.

    Example:
        >>> ScheduleData.from_dict(['not', 'a', 'mapping'])
        ValidationException: Snapshot payload must be a mapping
    """
    status_code = 400
    error_type = 'ValidationError'


class ConfigurationException(AppException):
    """
    Configuration errors (500)

    Raised when the engine is misconfigured.

    Example:
        >>> if CLOCK_TICK_SECONDS <= 0:
        ...     raise ConfigurationException('CLOCK_TICK_SECONDS must be positive')
    """
    status_code = 500
    error_type = 'ConfigurationError'


class SnapshotFetchException(AppException):
    """
    Snapshot fetch errors (502)

    Raised when the persistence collaborator fails to supply a snapshot.
    """
    status_code = 502
    error_type = 'SnapshotFetchError'
