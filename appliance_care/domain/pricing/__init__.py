"""Pricing domain: unit/order prices and discount selection"""

from .schemas import EquipmentFamily, OrderQuote, PricedLine, PricingRule, UnitLine
from .service import PricingCalculator

__all__ = ["EquipmentFamily", "OrderQuote", "PricedLine", "PricingCalculator", "PricingRule", "UnitLine"]
