"""
Maintenance schedule service
Derives recurring cleaning due-dates and applies completed visits to units
"""

import logging
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from ...exceptions import ValidationError
from ...schemas import Order, OrderStatus, ServiceCategory, ServicedUnit
from ...shared.validators import to_calendar_date
from .schemas import DueDates, DueTier

logger = logging.getLogger(__name__)


class MaintenanceScheduleCalculator:
    """Due-date arithmetic for serviced units"""

    @staticmethod
    def compute_due_dates(service_date: Optional[date]) -> Optional[DueDates]:
        """
        Due-dates 3, 4 and 6 calendar months after a service.

        relativedelta keeps the day of month and clamps to month end
        (Nov 30 + 3 months = Feb 28/29). Returns None for a unit that has
        never been serviced.
        """
        service_date = to_calendar_date(service_date)
        if service_date is None:
            return None

        return DueDates(
            due_3_months=service_date + relativedelta(months=3),
            due_4_months=service_date + relativedelta(months=4),
            due_6_months=service_date + relativedelta(months=6),
        )

    @staticmethod
    def effective_due_dates(unit: ServicedUnit) -> Optional[DueDates]:
        """
        Due-dates of a unit, recomputed from last_service_date when the stored
        columns are incomplete.
        """
        if unit.last_service_date is None:
            return None

        if unit.due_3_months and unit.due_4_months and unit.due_6_months:
            return DueDates(
                due_3_months=unit.due_3_months,
                due_4_months=unit.due_4_months,
                due_6_months=unit.due_6_months,
            )

        return MaintenanceScheduleCalculator.compute_due_dates(unit.last_service_date)

    @staticmethod
    def apply_completion(unit: ServicedUnit, order: Order, completed_on: date) -> ServicedUnit:
        """
        Return the unit as it stands after a completed visit.

        Cleaning overwrites last_service_date and all three due-dates.
        Repair and maintenance only record last_repair_date.

        Raises:
            ValidationError: If the order is not completed or does not cover the unit
        """
        if order.status != OrderStatus.COMPLETED:
            raise ValidationError(
                f"Order {order.id} is {order.status.value}, not completed",
                code="order_not_completed",
                context={"order_id": order.id, "status": order.status.value},
            )

        if not order.includes_unit(unit.id):
            raise ValidationError(
                f"Unit {unit.id} is not linked to order {order.id}",
                code="unit_not_linked",
                context={"order_id": order.id, "unit_id": unit.id},
            )

        completed_on = to_calendar_date(completed_on)

        if order.service_category is ServiceCategory.CLEANING:
            due_dates = MaintenanceScheduleCalculator.compute_due_dates(completed_on)
            updates = {"last_service_date": completed_on, **due_dates.as_unit_fields()}
        else:
            updates = {"last_repair_date": completed_on}

        logger.debug(f"Unit {unit.id} updated by {order.service_category.value} order {order.id}: {updates}")
        return unit.model_copy(update=updates)

    @staticmethod
    def due_tier(unit: ServicedUnit, today: date) -> Optional[DueTier]:
        """The furthest 3/4/6-month mark already passed, or None if nothing is overdue"""
        due_dates = MaintenanceScheduleCalculator.effective_due_dates(unit)
        if due_dates is None:
            return None

        passed = None
        for tier, due in due_dates.by_tier():
            if due < today:
                passed = tier
        return passed

    @staticmethod
    def due_today(unit: ServicedUnit, today: date) -> Optional[DueTier]:
        """The mark that falls exactly on today, if any"""
        due_dates = MaintenanceScheduleCalculator.effective_due_dates(unit)
        if due_dates is None:
            return None

        for tier, due in due_dates.by_tier():
            if due == today:
                return tier
        return None

    @staticmethod
    def days_until_due(unit: ServicedUnit, today: date) -> Optional[int]:
        """Days until the earliest due-date; negative when overdue"""
        due_dates = MaintenanceScheduleCalculator.effective_due_dates(unit)
        if due_dates is None:
            return None
        return (due_dates.earliest() - today).days
