"""Pricing domain schemas - Pydantic models for validation"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ...config import DEFAULT_SPLIT_SURCHARGE_THRESHOLD, DEFAULT_WINDOW_SURCHARGE_THRESHOLD
from ...exceptions import ConfigurationError
from ...schemas import ServiceCategory
from ...shared.validators import parse_decimal, validate_non_negative, validate_percentage

logger = logging.getLogger(__name__)

# Admin setting_key -> PricingRule field
SETTING_KEYS = {
    "split_type_price": "split_type_price",
    "window_type_price": "window_type_price",
    "surcharge": "surcharge",
    "repair_price": "repair_price",
    "discount": "discount",
    "family_discount": "relationship_discount",
    "split_surcharge_threshold": "split_surcharge_threshold",
    "window_surcharge_threshold": "window_surcharge_threshold",
}

REQUIRED_SETTINGS = ("split_type_price", "window_type_price", "surcharge", "repair_price")


class EquipmentFamily(str, Enum):
    """Pricing family an equipment category belongs to"""

    SPLIT = "split"  # split type and U-shaped units
    WINDOW = "window"

    @classmethod
    def from_category(cls, equipment_category: Optional[str]) -> Optional["EquipmentFamily"]:
        name = (equipment_category or "").strip().lower()
        if "window" in name:
            return cls.WINDOW
        if "split" in name or "u-shape" in name or "u shape" in name:
            return cls.SPLIT
        return None


class PricingRule(BaseModel):
    """
    Point-in-time snapshot of the admin pricing settings.

    Fetched once per request by the host and passed explicitly into every
    pricing call; past orders are never re-priced from a newer snapshot.
    """

    split_type_price: Decimal
    window_type_price: Decimal
    surcharge: Decimal
    split_surcharge_threshold: Decimal = DEFAULT_SPLIT_SURCHARGE_THRESHOLD
    window_surcharge_threshold: Decimal = DEFAULT_WINDOW_SURCHARGE_THRESHOLD
    discount: Decimal = Decimal("0")  # standard discount, percent
    relationship_discount: Decimal = Decimal("0")  # family/referral discount, percent
    repair_price: Decimal

    model_config = {"frozen": True, "from_attributes": True}

    @field_validator(
        "split_type_price",
        "window_type_price",
        "surcharge",
        "repair_price",
        "split_surcharge_threshold",
        "window_surcharge_threshold",
    )
    @classmethod
    def validate_amounts(cls, v, info):
        return validate_non_negative(v, info.field_name)

    @field_validator("discount", "relationship_discount", mode="before")
    @classmethod
    def validate_discounts(cls, v):
        if v is None:
            return Decimal("0")
        value = parse_decimal(v)
        if value is None:
            raise ValueError(f"Discount must be numeric: {v!r}")
        return validate_percentage(value)

    def base_price(self, family: EquipmentFamily) -> Decimal:
        if family is EquipmentFamily.WINDOW:
            return self.window_type_price
        return self.split_type_price

    def surcharge_threshold(self, family: EquipmentFamily) -> Decimal:
        if family is EquipmentFamily.WINDOW:
            return self.window_surcharge_threshold
        return self.split_surcharge_threshold

    @classmethod
    def from_settings(
        cls, settings: Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]
    ) -> "PricingRule":
        """
        Build a snapshot from the raw custom_settings rows.

        Accepts either {"split_type_price": "1500", ...} or the row form
        [{"setting_key": "split_type_price", "setting_value": "1500"}, ...].
        Unknown keys (SMS templates etc.) are ignored.

        Raises:
            ConfigurationError: If a required price is missing or any known
                setting is not numeric
        """
        if settings is None:
            raise ConfigurationError("No pricing settings available", code="pricing_rule_missing")

        if isinstance(settings, Mapping):
            pairs = settings.items()
        else:
            pairs = ((row.get("setting_key"), row.get("setting_value")) for row in settings)

        values: dict[str, Decimal] = {}
        for key, raw in pairs:
            field = SETTING_KEYS.get(key)
            if not field:
                continue
            value = parse_decimal(raw)
            if value is None:
                raise ConfigurationError(
                    f"Pricing setting '{key}' is not numeric: {raw!r}",
                    code="pricing_setting_invalid",
                    context={"setting_key": key},
                )
            values[field] = value

        missing = [key for key in REQUIRED_SETTINGS if key not in values]
        if missing:
            raise ConfigurationError(
                f"Missing pricing settings: {', '.join(missing)}",
                code="pricing_setting_missing",
                context={"missing": missing},
            )

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"Invalid pricing settings: {e}", code="pricing_setting_invalid")


class UnitLine(BaseModel):
    """One booking line: an equipment selection and how many of them"""

    unit_id: Optional[str] = None
    equipment_category: str
    capacity: Optional[Decimal] = None
    quantity: int = 1

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("quantity must be at least 1")
        return v


class PricedLine(BaseModel):
    unit_id: Optional[str] = None
    equipment_category: str
    capacity: Optional[Decimal] = None
    quantity: int
    unit_price: Decimal
    surcharge_applied: bool = False
    line_total: Decimal


class OrderQuote(BaseModel):
    """Priced order: subtotal, the single discount that applies, and total"""

    service_category: ServiceCategory
    lines: list[PricedLine] = Field(default_factory=list)
    unit_count: int
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total: Decimal
    discount_source: Optional[str] = None  # "standard" | "relationship"
