"""
Order Management Service
Handles status updates and the completion side effects: unit due-dates and referral awards
"""

import logging
from typing import Optional, Union

from ..clock import Clock, SystemClock
from ..domain.loyalty.service import LoyaltyLedger
from ..domain.orders.status import transition
from ..domain.schedule.service import MaintenanceScheduleCalculator
from ..exceptions import MaintenanceEngineError, NotFoundError, ValidationError
from ..repository import MaintenanceRepository
from ..schemas import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderService:
    """Service layer for order status transitions"""

    def __init__(self, repo: MaintenanceRepository, clock: Optional[Clock] = None):
        self.repo = repo
        self.clock = clock or SystemClock()

    def get_order(self, order_id: str) -> Order:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found", code="order_not_found")
        return order

    def update_status(self, order_id: str, status: Union[OrderStatus, str]) -> Order:
        """Confirm or void an order; completion goes through complete_order"""
        if status == OrderStatus.COMPLETED:
            self.complete_order(order_id)
            return self.get_order(order_id)

        order = transition(self.get_order(order_id), status)
        return self.repo.update_order_status(order.id, order.status)

    def complete_order(self, order_id: str) -> dict:
        """
        Mark an order as completed and apply its side effects.

        - every linked unit gets its service (cleaning) or repair date recorded
        - the referrer of the ordering client is rewarded once

        Nothing is written unless every linked unit can be updated.

        Returns:
            dict: Summary of changes made

        Raises:
            ValidationError: If the order is already completed or cannot move to completed
        """
        summary = {
            "order_id": order_id,
            "units_updated": 0,
            "points_awarded": 0,
            "referrer_id": None,
        }

        try:
            current = self.get_order(order_id)
            if current.status == OrderStatus.COMPLETED:
                raise ValidationError(
                    f"Order {current.id} is already completed",
                    code="order_already_completed",
                    context={"order_id": current.id},
                )

            order = transition(current, OrderStatus.COMPLETED)
            today = self.clock.today()

            updated_units = [
                MaintenanceScheduleCalculator.apply_completion(unit, order, today)
                for unit in self.repo.get_units_for_order(order.id)
            ]

            self.repo.update_order_status(order.id, order.status)
            for unit in updated_units:
                self.repo.update_unit(unit)
                summary["units_updated"] += 1

            self._award_referral(order, summary)

            logger.info(f"📊 Order completion summary: {summary}")
            return summary

        except MaintenanceEngineError as e:
            logger.warning(f"⚠️ Could not complete order {order_id}: {e}")
            raise
        except Exception as e:
            logger.error(f"❌ Error completing order {order_id}: {str(e)}")
            raise

    def _award_referral(self, order: Order, summary: dict) -> None:
        client = self.repo.get_client(order.client_id)
        if not client:
            logger.warning(f"⚠️ Client {order.client_id} for order {order.id} not found; skipping loyalty award")
            return

        referrer = self.repo.get_client(client.referred_by) if client.referred_by else None
        outcome = LoyaltyLedger.award_on_completion(order, client, referrer, self.clock.today())
        if outcome.is_noop:
            return

        for award in outcome.awards:
            self.repo.create_loyalty_award(award)

        if outcome.referrer_id:
            self.repo.update_client_points(
                outcome.referrer_id, outcome.referrer_points, outcome.referrer_points_expiry
            )

        if outcome.referral_consumed:
            self.repo.mark_referral_consumed(client.id)

        summary["points_awarded"] = outcome.points_awarded
        summary["referrer_id"] = outcome.referrer_id
