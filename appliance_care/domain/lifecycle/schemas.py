"""Lifecycle domain schemas"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..schedule.schemas import DueTier


class UnitStatus(str, Enum):
    SCHEDULED = "scheduled"
    DUE = "due"
    UP_TO_DATE = "up_to_date"
    REPAIR = "repair"
    VOIDED = "voided"
    NO_SERVICE = "no_service"


class UnitStatusView(BaseModel):
    """Resolved status of one unit for one service category"""

    unit_id: str
    location_id: Optional[str] = None
    unit_name: str
    status: UnitStatus
    due_tier: Optional[DueTier] = None
    days_until_due: Optional[int] = None
    last_service_date: Optional[date] = None


class LocationStatusSummary(BaseModel):
    """Per-location bucket counts for dashboard cards"""

    location_id: Optional[str] = None
    total_units: int = 0
    counts: dict[UnitStatus, int] = Field(default_factory=dict)
    due_by_tier: dict[DueTier, list[str]] = Field(default_factory=dict)  # tier -> unit names
    last_service_date: Optional[date] = None

    def count(self, status: UnitStatus) -> int:
        return self.counts.get(status, 0)
