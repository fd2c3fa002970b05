from .schemas import LocationStatusSummary, UnitStatus, UnitStatusView
from .service import UnitLifecycleResolver

__all__ = ["LocationStatusSummary", "UnitLifecycleResolver", "UnitStatus", "UnitStatusView"]
