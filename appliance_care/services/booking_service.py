"""Booking service - quotes, date checks, bookings and loyalty redemptions"""

import logging
import uuid
from datetime import date
from typing import Iterable, Optional, Union

from ..clock import Clock, SystemClock
from ..domain.blackout.service import BlackoutValidator
from ..domain.loyalty.service import LoyaltyLedger
from ..domain.pricing.schemas import OrderQuote, UnitLine
from ..domain.pricing.service import PricingCalculator, coerce_service_category
from ..exceptions import NotFoundError, ValidationError
from ..repository import MaintenanceRepository
from ..schemas import Client, Order, OrderStatus, ServiceCategory, ServicedUnit

logger = logging.getLogger(__name__)

RESCHEDULABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)


class BookingService:
    """
    Booking workflows for the host application.

    Each call fetches the pricing snapshot and blackout ranges once and then
    delegates to the pure rule components.
    """

    def __init__(self, repo: MaintenanceRepository, clock: Optional[Clock] = None):
        self.repo = repo
        self.clock = clock or SystemClock()

    def _calculator(self) -> PricingCalculator:
        return PricingCalculator(self.repo.get_active_pricing_rules())

    def _get_client(self, client_id: str) -> Client:
        client = self.repo.get_client(client_id)
        if not client:
            raise NotFoundError(f"Client {client_id} not found", code="client_not_found")
        return client

    def check_date(self, scheduled_date: date) -> date:
        """Validate a proposed date (future, not blacked out)"""
        return BlackoutValidator.validate_booking_date(
            scheduled_date, self.repo.get_blackout_ranges(), self.clock.today()
        )

    def next_available_date(self, after: Optional[date] = None) -> Optional[date]:
        return BlackoutValidator.next_available_date(after or self.clock.today(), self.repo.get_blackout_ranges())

    def quote(
        self,
        units: Iterable[Union[UnitLine, ServicedUnit]],
        service_category: Union[ServiceCategory, str],
        client_id: Optional[str] = None,
        scheduled_date: Optional[date] = None,
    ) -> OrderQuote:
        """Price a prospective booking, validating its date when one is given"""
        client = self._get_client(client_id) if client_id else None
        if scheduled_date is not None:
            self.check_date(scheduled_date)
        return self._calculator().price_order(units, service_category, client)

    def book(
        self,
        client_id: str,
        unit_ids: list[str],
        service_category: Union[ServiceCategory, str],
        scheduled_date: date,
        location_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """Create a pending order for some of the client's units"""
        category = coerce_service_category(service_category)
        client = self._get_client(client_id)

        owned = {unit.id: unit for unit in self.repo.get_units_by_client(client.id)}
        unknown = [unit_id for unit_id in unit_ids if unit_id not in owned]
        if not unit_ids or unknown:
            raise ValidationError(
                "Select at least one of the client's units",
                code="units_invalid",
                context={"unknown_unit_ids": unknown},
            )

        day = self.check_date(scheduled_date)
        units = [owned[unit_id] for unit_id in unit_ids]
        quote = self._calculator().price_order(units, category, client)

        order = Order(
            id=str(uuid.uuid4()),
            client_id=client.id,
            location_id=location_id or units[0].location_id,
            service_category=category,
            scheduled_date=day,
            status=OrderStatus.PENDING,
            amount=quote.total,
            unit_count=quote.unit_count,
            unit_ids=list(unit_ids),
            discount_percent=quote.discount_percent,
            discount_amount=quote.discount_amount,
            notes=notes,
            created_at=self.clock.now(),
        )
        created = self.repo.create_order(order)
        logger.info(f"✅ Booked {category.value} order {created.id} for client {client.id} on {day}")
        return created

    def reschedule(self, order_id: str, new_date: date) -> Order:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found", code="order_not_found")

        if order.status not in RESCHEDULABLE_STATUSES:
            raise ValidationError(
                f"Order {order.id} is {order.status.value} and cannot be rescheduled",
                code="order_not_reschedulable",
            )

        day = self.check_date(new_date)
        logger.info(f"📅 Order {order.id} rescheduled: {order.scheduled_date} → {day}")
        return self.repo.update_order_schedule(order.id, day)

    def redeem(self, client_id: str, unit_id: str, scheduled_date: date) -> Order:
        """Book a free cleaning for the client's cheapest unit using loyalty points"""
        client = self._get_client(client_id)
        today = self.clock.today()
        units = self.repo.get_units_by_client(client.id)

        unit = next((u for u in units if u.id == unit_id), None)
        if unit is None:
            raise ValidationError(
                f"Unit {unit_id} does not belong to client {client.id}",
                code="unit_not_owned",
                context={"unit_id": unit_id},
            )

        awards = self.repo.get_loyalty_awards(client.id)
        plan = LoyaltyLedger.plan_redemption(
            client=client,
            unit=unit,
            client_units=units,
            awards=awards,
            rule=self.repo.get_active_pricing_rules(),
            scheduled_date=scheduled_date,
            blackout_ranges=self.repo.get_blackout_ranges(),
            today=today,
            client_orders=self.repo.get_orders_by_client(client.id),
        )

        order = self.repo.create_order(plan.order.model_copy(update={"created_at": self.clock.now()}))

        existing = [award for award in plan.redeemed_awards if award.id]
        for award in plan.redeemed_awards:
            if not award.id:
                self.repo.create_loyalty_award(award)
        self.repo.update_loyalty_awards(existing + plan.updated_awards)

        redeemed_ids = {award.id for award in existing}
        updated = {award.id: award for award in plan.updated_awards}
        remaining = [updated.get(a.id, a) for a in awards if a.id not in redeemed_ids]
        self.repo.update_client_points(
            client.id, plan.new_points_balance, LoyaltyLedger.points_expiry(remaining, today)
        )

        logger.info(f"🎁 Client {client.id} redeemed {plan.points_used} points for order {order.id}")
        return order
