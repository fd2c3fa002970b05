"""Dashboard queries - per-unit lifecycle status and location cards"""

import logging
from typing import Optional, Union

from ..clock import Clock, SystemClock
from ..domain.lifecycle.schemas import LocationStatusSummary, UnitStatusView
from ..domain.lifecycle.service import UnitLifecycleResolver
from ..domain.pricing.service import coerce_service_category
from ..repository import MaintenanceRepository
from ..schemas import Order, ServiceCategory, ServicedUnit

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, repo: MaintenanceRepository, clock: Optional[Clock] = None):
        self.repo = repo
        self.clock = clock or SystemClock()

    def _snapshot(self, client_id: str) -> tuple[list[ServicedUnit], list[Order]]:
        """A client's units and every order linked to any of them, each order once"""
        units = self.repo.get_units_by_client(client_id)
        orders: dict[str, Order] = {}
        for unit in units:
            for order in self.repo.get_orders_linked_to_unit(unit.id):
                orders.setdefault(order.id, order)
        return units, list(orders.values())

    def statuses_for_client(
        self,
        client_id: str,
        service_category: Union[ServiceCategory, str] = ServiceCategory.CLEANING,
        treat_unserviced_as_scheduled: bool = False,
    ) -> list[UnitStatusView]:
        category = coerce_service_category(service_category)
        units, orders = self._snapshot(client_id)
        return UnitLifecycleResolver.resolve_statuses(
            units, orders, self.clock.today(), category, treat_unserviced_as_scheduled
        )

    def location_summary(
        self, client_id: str, service_category: Union[ServiceCategory, str] = ServiceCategory.CLEANING
    ) -> list[LocationStatusSummary]:
        """Status counts per location for the client's dashboard cards"""
        category = coerce_service_category(service_category)
        units, orders = self._snapshot(client_id)
        summaries = UnitLifecycleResolver.summarize_by_location(units, orders, self.clock.today(), category)
        logger.info(f"📊 Built {category.value} summary for client {client_id}: {len(summaries)} location(s)")
        return summaries
