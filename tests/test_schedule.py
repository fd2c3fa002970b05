"""
Unit tests for due-date arithmetic and completion updates.
"""

from datetime import date

import pytest

from appliance_care.domain.schedule import DueTier, MaintenanceScheduleCalculator
from appliance_care.exceptions import ValidationError
from appliance_care.schemas import OrderStatus


class TestComputeDueDates:
    """3/4/6 calendar-month offsets."""

    def test_offsets(self):
        due = MaintenanceScheduleCalculator.compute_due_dates(date(2025, 1, 15))
        assert due.due_3_months == date(2025, 4, 15)
        assert due.due_4_months == date(2025, 5, 15)
        assert due.due_6_months == date(2025, 7, 15)

    def test_strictly_increasing(self):
        due = MaintenanceScheduleCalculator.compute_due_dates(date(2025, 8, 31))
        assert due.due_3_months < due.due_4_months < due.due_6_months

    def test_month_end_is_clamped(self):
        due = MaintenanceScheduleCalculator.compute_due_dates(date(2023, 11, 30))
        assert due.due_3_months == date(2024, 2, 29)
        assert due.due_4_months == date(2024, 3, 30)
        assert due.due_6_months == date(2024, 5, 30)

    def test_crosses_year(self):
        due = MaintenanceScheduleCalculator.compute_due_dates(date(2025, 10, 1))
        assert due.due_6_months == date(2026, 4, 1)

    def test_datetime_input_is_truncated(self):
        due = MaintenanceScheduleCalculator.compute_due_dates("2025-01-15T22:30:00")
        assert due.due_3_months == date(2025, 4, 15)

    def test_never_serviced(self):
        assert MaintenanceScheduleCalculator.compute_due_dates(None) is None


class TestApplyCompletion:
    """Unit updates after a completed visit."""

    def test_cleaning_sets_service_and_due_dates(self, make_unit, make_order):
        unit = make_unit()
        order = make_order(status=OrderStatus.COMPLETED)

        updated = MaintenanceScheduleCalculator.apply_completion(unit, order, date(2025, 6, 15))

        assert updated.last_service_date == date(2025, 6, 15)
        assert updated.due_3_months == date(2025, 9, 15)
        assert updated.due_4_months == date(2025, 10, 15)
        assert updated.due_6_months == date(2025, 12, 15)
        assert updated.last_repair_date is None

    def test_input_unit_is_not_mutated(self, make_unit, make_order):
        unit = make_unit()
        MaintenanceScheduleCalculator.apply_completion(
            unit, make_order(status=OrderStatus.COMPLETED), date(2025, 6, 15)
        )
        assert unit.last_service_date is None

    @pytest.mark.parametrize("category", ["repair", "maintenance"])
    def test_repair_leaves_due_dates(self, make_unit, make_order, category):
        unit = make_unit(last_service_date=date(2025, 1, 10), due_3_months=date(2025, 4, 10))
        order = make_order(status=OrderStatus.COMPLETED, service_category=category)

        updated = MaintenanceScheduleCalculator.apply_completion(unit, order, date(2025, 6, 15))

        assert updated.last_repair_date == date(2025, 6, 15)
        assert updated.last_service_date == date(2025, 1, 10)
        assert updated.due_3_months == date(2025, 4, 10)

    def test_requires_completed_order(self, make_unit, make_order):
        with pytest.raises(ValidationError) as exc_info:
            MaintenanceScheduleCalculator.apply_completion(make_unit(), make_order(), date(2025, 6, 15))
        assert exc_info.value.code == "order_not_completed"

    def test_requires_linked_unit(self, make_unit, make_order):
        order = make_order(status=OrderStatus.COMPLETED, unit_ids=["other"])
        with pytest.raises(ValidationError) as exc_info:
            MaintenanceScheduleCalculator.apply_completion(make_unit(), order, date(2025, 6, 15))
        assert exc_info.value.code == "unit_not_linked"


class TestDueTiers:
    """Dashboard buckets and reminder marks."""

    def test_furthest_passed_tier(self, make_unit):
        unit = make_unit(last_service_date=date(2025, 1, 1))
        assert MaintenanceScheduleCalculator.due_tier(unit, date(2025, 4, 1)) is None
        assert MaintenanceScheduleCalculator.due_tier(unit, date(2025, 4, 2)) is DueTier.THREE_MONTHS
        assert MaintenanceScheduleCalculator.due_tier(unit, date(2025, 5, 10)) is DueTier.FOUR_MONTHS
        assert MaintenanceScheduleCalculator.due_tier(unit, date(2025, 8, 1)) is DueTier.SIX_MONTHS

    def test_due_today(self, make_unit):
        unit = make_unit(last_service_date=date(2025, 1, 1))
        assert MaintenanceScheduleCalculator.due_today(unit, date(2025, 5, 1)) is DueTier.FOUR_MONTHS
        assert MaintenanceScheduleCalculator.due_today(unit, date(2025, 5, 2)) is None

    def test_days_until_due(self, make_unit):
        unit = make_unit(last_service_date=date(2025, 1, 1))
        assert MaintenanceScheduleCalculator.days_until_due(unit, date(2025, 3, 30)) == 2
        assert MaintenanceScheduleCalculator.days_until_due(unit, date(2025, 4, 3)) == -2

    def test_unserviced_unit(self, make_unit):
        unit = make_unit()
        assert MaintenanceScheduleCalculator.due_tier(unit, date(2025, 6, 15)) is None
        assert MaintenanceScheduleCalculator.days_until_due(unit, date(2025, 6, 15)) is None

    def test_tier_labels(self):
        assert DueTier.THREE_MONTHS.label == "3 mos"
        assert DueTier.SIX_MONTHS.unit_field == "due_6_months"
