"""
Unit lifecycle resolution
Single source of truth for the per-unit status shown on client and admin dashboards
"""

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Iterable, Optional, Union

from ...schemas import Order, OrderStatus, ServiceCategory, ServicedUnit
from ...shared.validators import to_calendar_date
from ..schedule.service import MaintenanceScheduleCalculator
from .schemas import LocationStatusSummary, UnitStatus, UnitStatusView

logger = logging.getLogger(__name__)

BOOKED_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)


def _recency_key(order: Order):
    return (order.scheduled_date, order.created_at or datetime.min)


class UnitLifecycleResolver:
    """
    Resolves a unit's status per service category.

    Precedence (first match wins):
    1. scheduled  - a pending/confirmed order, or a redeemed visit not yet past
    2. voided     - the most recent relevant order was voided
    3. repair     - the unit has a repair on record
    4. due        - earliest due-date is before today
       up_to_date - otherwise (a past redeemed visit counts as a cleaning)
    5. no_service - never cleaned and not booked
    """

    @staticmethod
    def relevant_orders(
        unit: ServicedUnit, orders: Iterable[Order], service_category: ServiceCategory
    ) -> list[Order]:
        """Orders linking this unit within the same service group, newest first"""
        group = service_category.service_group
        relevant = [
            order
            for order in orders
            if order.includes_unit(unit.id) and order.service_category.service_group == group
        ]
        return sorted(relevant, key=_recency_key, reverse=True)

    @staticmethod
    def effective_unit(
        unit: ServicedUnit,
        linked_orders: Iterable[Order],
        now: Union[date, datetime],
        service_category: ServiceCategory = ServiceCategory.CLEANING,
    ) -> ServicedUnit:
        """
        The unit with a past free cleaning counted as its last service.

        Redeemed orders are terminal and never pass through completion, so a
        redemption dated before today that is newer than last_service_date
        stands in for it and the due-dates are recomputed from that day.
        """
        category = ServiceCategory(service_category)
        if category.service_group != ServiceCategory.CLEANING.service_group:
            return unit

        today = to_calendar_date(now)
        redeemed = [
            order.scheduled_date
            for order in UnitLifecycleResolver.relevant_orders(unit, linked_orders, category)
            if order.status == OrderStatus.REDEEMED and order.scheduled_date < today
        ]
        if not redeemed:
            return unit

        latest = max(redeemed)
        if unit.last_service_date is not None and unit.last_service_date >= latest:
            return unit

        due_dates = MaintenanceScheduleCalculator.compute_due_dates(latest)
        return unit.model_copy(update={"last_service_date": latest, **due_dates.as_unit_fields()})

    @staticmethod
    def resolve_status(
        unit: ServicedUnit,
        linked_orders: Iterable[Order],
        now: Union[date, datetime],
        service_category: ServiceCategory = ServiceCategory.CLEANING,
        treat_unserviced_as_scheduled: bool = False,
    ) -> UnitStatus:
        today = to_calendar_date(now)
        relevant = UnitLifecycleResolver.relevant_orders(unit, linked_orders, ServiceCategory(service_category))

        # 1. A booked visit supersedes any date-based reasoning
        for order in relevant:
            if order.status in BOOKED_STATUSES:
                return UnitStatus.SCHEDULED
            if order.status == OrderStatus.REDEEMED and order.scheduled_date >= today:
                return UnitStatus.SCHEDULED

        # 2. Latest visit was called off
        if relevant and relevant[0].status == OrderStatus.VOIDED:
            return UnitStatus.VOIDED

        # 3. Repair history is its own bucket
        if unit.last_repair_date is not None:
            return UnitStatus.REPAIR

        # 4. Due vs up to date
        unit = UnitLifecycleResolver.effective_unit(unit, relevant, today, service_category)
        due_dates = MaintenanceScheduleCalculator.effective_due_dates(unit)
        if due_dates is not None:
            return UnitStatus.DUE if due_dates.earliest() < today else UnitStatus.UP_TO_DATE

        # 5. Never cleaned, never booked
        if treat_unserviced_as_scheduled:
            return UnitStatus.SCHEDULED
        return UnitStatus.NO_SERVICE

    @staticmethod
    def resolve_statuses(
        units: Iterable[ServicedUnit],
        orders: Iterable[Order],
        now: Union[date, datetime],
        service_category: ServiceCategory = ServiceCategory.CLEANING,
        treat_unserviced_as_scheduled: bool = False,
    ) -> list[UnitStatusView]:
        """Resolve every unit of a client against one consistent order snapshot"""
        today = to_calendar_date(now)
        orders = list(orders)
        views = []

        for unit in units:
            status = UnitLifecycleResolver.resolve_status(
                unit, orders, today, service_category, treat_unserviced_as_scheduled
            )
            unit = UnitLifecycleResolver.effective_unit(unit, orders, today, service_category)
            views.append(
                UnitStatusView(
                    unit_id=unit.id,
                    location_id=unit.location_id,
                    unit_name=unit.display_name,
                    status=status,
                    due_tier=(
                        MaintenanceScheduleCalculator.due_tier(unit, today) if status == UnitStatus.DUE else None
                    ),
                    days_until_due=MaintenanceScheduleCalculator.days_until_due(unit, today),
                    last_service_date=unit.last_service_date,
                )
            )
        return views

    @staticmethod
    def summarize_by_location(
        units: Iterable[ServicedUnit],
        orders: Iterable[Order],
        now: Union[date, datetime],
        service_category: ServiceCategory = ServiceCategory.CLEANING,
    ) -> list[LocationStatusSummary]:
        """
        Bucket counts per location, in first-seen location order.

        The latest cleaning across a location's units is reported as the
        location's last service date.
        """
        summaries: "OrderedDict[Optional[str], LocationStatusSummary]" = OrderedDict()

        for view in UnitLifecycleResolver.resolve_statuses(units, orders, now, service_category):
            summary = summaries.setdefault(view.location_id, LocationStatusSummary(location_id=view.location_id))
            summary.total_units += 1
            summary.counts[view.status] = summary.counts.get(view.status, 0) + 1

            if view.due_tier is not None:
                summary.due_by_tier.setdefault(view.due_tier, []).append(view.unit_name)

            if view.last_service_date and (
                summary.last_service_date is None or view.last_service_date > summary.last_service_date
            ):
                summary.last_service_date = view.last_service_date

        logger.debug(f"📊 Summarized {len(summaries)} location(s) for {ServiceCategory(service_category).value}")
        return list(summaries.values())
