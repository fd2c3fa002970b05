"""Core entities shared by every rule component - Pydantic models"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .shared.validators import to_calendar_date, validate_non_negative


class ServiceCategory(str, Enum):
    CLEANING = "cleaning"
    REPAIR = "repair"
    MAINTENANCE = "maintenance"

    @classmethod
    def from_service_name(cls, name: str) -> "ServiceCategory":
        """
        Map a free-text service name ("Aircon Cleaning", "Repair",
        "General Maintenance") to its category.

        Raises:
            ValueError: If the name matches no category
        """
        lowered = (name or "").strip().lower()
        if "clean" in lowered:
            return cls.CLEANING
        if "repair" in lowered:
            return cls.REPAIR
        if "maintenance" in lowered:
            return cls.MAINTENANCE
        raise ValueError(f"Unknown service name: {name!r}")

    @property
    def service_group(self) -> str:
        """Cleaning is tracked on its own; repair and maintenance share a history"""
        return "cleaning" if self is ServiceCategory.CLEANING else "repair"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    VOIDED = "voided"
    REDEEMED = "redeemed"


class LoyaltyAwardStatus(str, Enum):
    ACTIVE = "active"
    REDEEMED = "redeemed"


class ServicedUnit(BaseModel):
    """A single piece of client equipment receiving recurring maintenance"""

    id: str
    client_id: str
    location_id: Optional[str] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    equipment_category: str
    capacity: Optional[Decimal] = None  # horsepower, e.g. 1.0, 1.5, 2.0, 2.5
    last_service_date: Optional[date] = None
    last_repair_date: Optional[date] = None
    due_3_months: Optional[date] = None
    due_4_months: Optional[date] = None
    due_6_months: Optional[date] = None

    model_config = {"from_attributes": True}

    @field_validator(
        "last_service_date",
        "last_repair_date",
        "due_3_months",
        "due_4_months",
        "due_6_months",
        mode="before",
    )
    @classmethod
    def normalize_dates(cls, v):
        return to_calendar_date(v)

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, v):
        return validate_non_negative(v, "capacity")

    @property
    def display_name(self) -> str:
        return self.name or f"{self.brand or ''} {self.equipment_category}".strip()

    def due_dates(self) -> list[date]:
        """The due-dates that are set, earliest first"""
        return sorted(d for d in (self.due_3_months, self.due_4_months, self.due_6_months) if d)


class Client(BaseModel):
    id: str
    name: Optional[str] = None
    points: int = 0
    points_expiry: Optional[date] = None
    relationship_discount_eligible: bool = False
    referred_by: Optional[str] = None  # referrer client id, cleared once rewarded

    model_config = {"from_attributes": True}

    @field_validator("points_expiry", mode="before")
    @classmethod
    def normalize_expiry(cls, v):
        return to_calendar_date(v)

    @field_validator("points")
    @classmethod
    def validate_points(cls, v):
        if v < 0:
            raise ValueError("points must not be negative")
        return v


class OrderUnitLink(BaseModel):
    """Association between an order and one of its units; immutable"""

    order_id: str
    unit_id: str

    model_config = {"frozen": True}


class Order(BaseModel):
    """A booked service visit (appointment) for one or more units"""

    id: str
    client_id: str
    location_id: Optional[str] = None
    service_category: ServiceCategory
    scheduled_date: date
    status: OrderStatus = OrderStatus.PENDING
    amount: Decimal = Decimal("0.00")
    unit_count: int = 0
    unit_ids: list[str] = Field(default_factory=list)
    discount_percent: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0.00")
    points_used: int = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def normalize_scheduled_date(cls, v):
        return to_calendar_date(v)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        return validate_non_negative(v, "amount")

    @model_validator(mode="after")
    def default_unit_count(self):
        if not self.unit_count and self.unit_ids:
            self.unit_count = len(self.unit_ids)
        return self

    def links(self) -> list[OrderUnitLink]:
        return [OrderUnitLink(order_id=self.id, unit_id=unit_id) for unit_id in self.unit_ids]

    def includes_unit(self, unit_id: str) -> bool:
        return unit_id in self.unit_ids


class BlackoutRange(BaseModel):
    """Admin-configured interval during which no new service may be scheduled"""

    id: str
    name: str
    from_date: date
    to_date: date
    reason: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def normalize_bounds(cls, v):
        return to_calendar_date(v)

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.from_date > self.to_date:
            raise ValueError("from_date must be on or before to_date")
        return self


class LoyaltyAward(BaseModel):
    """One unit of earned loyalty credit"""

    id: Optional[str] = None
    client_id: str
    order_id: Optional[str] = None
    points: int
    status: LoyaltyAwardStatus = LoyaltyAwardStatus.ACTIVE
    date_earned: date
    date_expiry: Optional[date] = None
    is_referral: bool = False

    model_config = {"from_attributes": True}

    @field_validator("date_earned", "date_expiry", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return to_calendar_date(v)

    @field_validator("points")
    @classmethod
    def validate_points(cls, v):
        if v <= 0:
            raise ValueError("points must be greater than 0")
        return v

    def is_spendable(self, today: date) -> bool:
        """Active and not yet expired (an award expiring today is already spent)"""
        if self.status != LoyaltyAwardStatus.ACTIVE:
            return False
        return self.date_expiry is None or self.date_expiry > today
