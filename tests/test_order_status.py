"""
Unit tests for order status transitions and revenue helpers.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from appliance_care.domain.orders import (
    redemptions_in_year,
    revenue_total,
    transition,
    validate_status_transition,
)
from appliance_care.exceptions import ValidationError
from appliance_care.schemas import OrderStatus, ServiceCategory


class TestValidateStatusTransition:
    """Forward-only transitions."""

    @pytest.mark.parametrize(
        "current,new",
        [
            ("pending", "confirmed"),
            ("pending", "voided"),
            ("confirmed", "completed"),
            ("confirmed", "voided"),
            ("completed", "completed"),
        ],
    )
    def test_allowed(self, current, new):
        assert validate_status_transition(current, new)

    @pytest.mark.parametrize(
        "current,new",
        [
            ("pending", "completed"),
            ("completed", "pending"),
            ("voided", "confirmed"),
            ("redeemed", "completed"),
        ],
    )
    def test_rejected(self, current, new):
        assert not validate_status_transition(current, new)


class TestTransition:
    def test_returns_updated_copy(self, make_order):
        order = make_order()
        confirmed = transition(order, "confirmed")
        assert confirmed.status is OrderStatus.CONFIRMED
        assert order.status is OrderStatus.PENDING

    def test_illegal_transition(self, make_order):
        with pytest.raises(ValidationError) as exc_info:
            transition(make_order(status=OrderStatus.VOIDED), OrderStatus.CONFIRMED)
        assert exc_info.value.code == "status_transition_invalid"

    def test_unknown_status(self, make_order):
        with pytest.raises(ValidationError) as exc_info:
            transition(make_order(), "archived")
        assert exc_info.value.code == "status_invalid"


class TestRevenue:
    """Only completed paid orders count as revenue."""

    def test_revenue_total(self, make_order):
        orders = [
            make_order("o1", status=OrderStatus.COMPLETED, amount=Decimal("900.00")),
            make_order("o2", status=OrderStatus.PENDING, amount=Decimal("500.00")),
            make_order("o3", status=OrderStatus.REDEEMED, amount=Decimal("0.00")),
            make_order("o4", status=OrderStatus.COMPLETED, amount=Decimal("450.50")),
        ]
        assert revenue_total(orders) == Decimal("1350.50")

    def test_redemptions_in_year(self, make_order):
        orders = [
            make_order("o1", status=OrderStatus.REDEEMED, scheduled_date=date(2025, 2, 1)),
            make_order("o2", status=OrderStatus.REDEEMED, scheduled_date=date(2024, 12, 31)),
            make_order("o3", status=OrderStatus.COMPLETED, scheduled_date=date(2025, 3, 1)),
        ]
        assert redemptions_in_year(orders, 2025) == 1

    def test_redemptions_counted_by_booking_day(self, make_order):
        order = make_order(
            "o1",
            status=OrderStatus.REDEEMED,
            scheduled_date=date(2025, 1, 10),
            created_at=datetime(2024, 12, 20, 14, 0),
        )
        assert redemptions_in_year([order], 2024) == 1
        assert redemptions_in_year([order], 2025) == 0


class TestServiceCategoryNames:
    """Free-text service names map to a category."""

    def test_names(self):
        assert ServiceCategory.from_service_name("Aircon Cleaning") is ServiceCategory.CLEANING
        assert ServiceCategory.from_service_name("Repair") is ServiceCategory.REPAIR
        assert ServiceCategory.from_service_name("General Maintenance") is ServiceCategory.MAINTENANCE

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            ServiceCategory.from_service_name("Installation")
