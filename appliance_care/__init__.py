"""Maintenance lifecycle and pricing rule engine for appliance servicing"""

from .clock import Clock, FixedClock, SystemClock
from .exceptions import ConfigurationError, MaintenanceEngineError, NotFoundError, ValidationError
from .repository import MaintenanceRepository

__version__ = "1.0.0"

__all__ = [
    "Clock",
    "ConfigurationError",
    "FixedClock",
    "MaintenanceEngineError",
    "MaintenanceRepository",
    "NotFoundError",
    "SystemClock",
    "ValidationError",
]
