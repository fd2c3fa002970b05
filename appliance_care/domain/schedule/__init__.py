from .schemas import DueDates, DueTier
from .service import MaintenanceScheduleCalculator

__all__ = ["DueDates", "DueTier", "MaintenanceScheduleCalculator"]
