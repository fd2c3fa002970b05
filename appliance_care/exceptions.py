"""
Error taxonomy for the maintenance engine.

ValidationError is always surfaced to the caller/user and never retried.
ConfigurationError means the calculation in progress cannot be trusted
(e.g. no pricing snapshot) and the caller must refuse to quote.
"""

from typing import Any, Optional


class MaintenanceEngineError(Exception):
    """Base class for all engine errors"""

    def __init__(self, message: str, code: str = "error", context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(MaintenanceEngineError):
    """Raised for bad input: pricing attributes, dates, redemption eligibility, transitions"""

    pass


class ConfigurationError(MaintenanceEngineError):
    """Raised when pricing configuration is missing or cannot price a category"""

    pass


class NotFoundError(MaintenanceEngineError):
    """Raised when the host repository has no record for a requested id"""

    pass
