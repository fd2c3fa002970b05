"""Pricing service - unit and order prices from a PricingRule snapshot"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from ...exceptions import ConfigurationError, ValidationError
from ...schemas import Client, ServiceCategory, ServicedUnit
from ...shared.money import ZERO, percentage_of, quantize
from .schemas import EquipmentFamily, OrderQuote, PricedLine, PricingRule, UnitLine

logger = logging.getLogger(__name__)


def coerce_service_category(value: Union[ServiceCategory, str]) -> ServiceCategory:
    if isinstance(value, ServiceCategory):
        return value
    try:
        return ServiceCategory(value)
    except ValueError:
        raise ValidationError(
            f"Unknown service category: {value!r}",
            code="service_category_invalid",
            context={"service_category": value},
        )


class PricingCalculator:
    """
    Prices units and orders.

    Pure over its inputs and the PricingRule snapshot it was built with.
    """

    def __init__(self, rule: Optional[PricingRule]):
        if rule is None:
            raise ConfigurationError("No pricing rule snapshot available", code="pricing_rule_missing")
        self.rule = rule

    def price_unit(
        self,
        equipment_category: Optional[str],
        capacity: Optional[Decimal],
        service_category: Union[ServiceCategory, str],
    ) -> Decimal:
        """Price of one unit, before any order-level discount"""
        price, _ = self._price_with_surcharge_flag(equipment_category, capacity, service_category)
        return price

    def _price_with_surcharge_flag(self, equipment_category, capacity, service_category) -> tuple[Decimal, bool]:
        category = coerce_service_category(service_category)

        # Repairs are a flat fee regardless of unit attributes
        if category is ServiceCategory.REPAIR:
            return quantize(self.rule.repair_price), False

        family = EquipmentFamily.from_category(equipment_category)
        if family is None:
            raise ConfigurationError(
                f"Equipment category '{equipment_category}' has no configured price",
                code="category_not_priced",
                context={"equipment_category": equipment_category},
            )

        if capacity is None:
            raise ValidationError(
                "Capacity is required to price a unit",
                code="capacity_missing",
                context={"equipment_category": equipment_category},
            )
        capacity = Decimal(str(capacity))
        if capacity < 0:
            raise ValidationError(
                "Capacity must not be negative", code="capacity_invalid", context={"capacity": str(capacity)}
            )

        price = self.rule.base_price(family)
        surcharged = capacity > self.rule.surcharge_threshold(family)
        if surcharged:
            price += self.rule.surcharge
        return quantize(price), surcharged

    def select_discount(self, client: Optional[Client]) -> tuple[Decimal, Optional[str]]:
        """
        Pick the single discount percentage that applies to a non-repair order.

        Returns:
            (percent, source) where source is "standard", "relationship" or None
        """
        standard = self.rule.discount
        relationship = self.rule.relationship_discount

        if client is not None and client.relationship_discount_eligible and relationship > standard:
            return relationship, "relationship"
        if standard > 0:
            return standard, "standard"
        return Decimal("0"), None

    def price_order(
        self,
        units: Iterable[Union[UnitLine, ServicedUnit]],
        service_category: Union[ServiceCategory, str],
        client: Optional[Client] = None,
    ) -> OrderQuote:
        category = coerce_service_category(service_category)

        lines: list[PricedLine] = []
        for unit in units:
            line = self._to_line(unit)
            unit_price, surcharged = self._price_with_surcharge_flag(
                line.equipment_category, line.capacity, category
            )
            lines.append(
                PricedLine(
                    unit_id=line.unit_id,
                    equipment_category=line.equipment_category,
                    capacity=line.capacity,
                    quantity=line.quantity,
                    unit_price=unit_price,
                    surcharge_applied=surcharged,
                    line_total=quantize(unit_price * line.quantity),
                )
            )

        if not lines:
            raise ValidationError("At least one unit is required to price an order", code="no_units")

        subtotal = quantize(sum((line.line_total for line in lines), ZERO))

        if category is ServiceCategory.REPAIR:
            percent, source = Decimal("0"), None
        else:
            percent, source = self.select_discount(client)

        discount_amount = percentage_of(subtotal, percent) if percent > 0 else ZERO
        total = max(ZERO, subtotal - discount_amount)

        quote = OrderQuote(
            service_category=category,
            lines=lines,
            unit_count=sum(line.quantity for line in lines),
            subtotal=subtotal,
            discount_percent=percent,
            discount_amount=discount_amount,
            total=quantize(total),
            discount_source=source,
        )
        logger.debug(
            f"Priced {category.value} order: {quote.unit_count} unit(s), subtotal {subtotal}, "
            f"discount {percent}% ({source or 'none'}), total {quote.total}"
        )
        return quote

    @staticmethod
    def _to_line(unit: Union[UnitLine, ServicedUnit]) -> UnitLine:
        if isinstance(unit, UnitLine):
            return unit
        if isinstance(unit, ServicedUnit):
            return UnitLine(unit_id=unit.id, equipment_category=unit.equipment_category, capacity=unit.capacity)
        return UnitLine.model_validate(unit)
