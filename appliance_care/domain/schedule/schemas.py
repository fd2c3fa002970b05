"""Schedule domain schemas"""

from datetime import date
from enum import Enum

from pydantic import BaseModel


class DueTier(str, Enum):
    """Recurring cleaning marks, in months after the last service"""

    THREE_MONTHS = "3_months"
    FOUR_MONTHS = "4_months"
    SIX_MONTHS = "6_months"

    @property
    def months(self) -> int:
        return {"3_months": 3, "4_months": 4, "6_months": 6}[self.value]

    @property
    def label(self) -> str:
        return f"{self.months} mos"

    @property
    def unit_field(self) -> str:
        return f"due_{self.months}_months"


class DueDates(BaseModel):
    """The three recurring due-dates derived from one service date"""

    due_3_months: date
    due_4_months: date
    due_6_months: date

    model_config = {"frozen": True}

    def as_unit_fields(self) -> dict[str, date]:
        return {
            "due_3_months": self.due_3_months,
            "due_4_months": self.due_4_months,
            "due_6_months": self.due_6_months,
        }

    def earliest(self) -> date:
        return self.due_3_months

    def by_tier(self) -> list[tuple[DueTier, date]]:
        return [
            (DueTier.THREE_MONTHS, self.due_3_months),
            (DueTier.FOUR_MONTHS, self.due_4_months),
            (DueTier.SIX_MONTHS, self.due_6_months),
        ]
