"""
Loyalty ledger
Referral awards on order completion and free-cleaning redemption
"""

import logging
import uuid
from datetime import date
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from ...config import (
    LOYALTY_POINT_VALIDITY_MONTHS,
    MAX_REDEMPTIONS_PER_YEAR,
    REDEMPTION_POINT_COST,
    REFERRAL_BONUS_UNIT_THRESHOLD,
)
from ...exceptions import ValidationError
from ...schemas import (
    BlackoutRange,
    Client,
    LoyaltyAward,
    LoyaltyAwardStatus,
    Order,
    OrderStatus,
    ServiceCategory,
    ServicedUnit,
)
from ...shared.money import ZERO
from ..blackout.service import BlackoutValidator
from ..orders.status import redemptions_in_year
from ..pricing.schemas import PricingRule
from ..pricing.service import PricingCalculator
from .schemas import AwardConsumption, AwardOutcome, RedemptionPlan

logger = logging.getLogger(__name__)


def generate_order_id() -> str:
    return str(uuid.uuid4())


class LoyaltyLedger:
    """Pure loyalty rules; the host persists the outcomes"""

    @staticmethod
    def points_for_order(order: Order) -> int:
        """1 point per completed referred order, +1 for orders of 3 or more units"""
        points = 1
        if order.unit_count >= REFERRAL_BONUS_UNIT_THRESHOLD:
            points += 1
        return points

    @staticmethod
    def award_on_completion(
        order: Order, client: Client, referrer: Optional[Client], today: date
    ) -> AwardOutcome:
        """
        Reward the referrer of a client whose order just completed.

        The referral is consumed with the award, so calling this again with
        the updated client is a no-op. Data anomalies (unknown referrer,
        self-referral) are logged and skipped so they never block completion.

        Raises:
            ValidationError: If the order is not completed or belongs to another client
        """
        if order.status != OrderStatus.COMPLETED:
            raise ValidationError(
                f"Cannot award points for order {order.id} in status {order.status.value}",
                code="order_not_completed",
                context={"order_id": order.id, "status": order.status.value},
            )

        if order.client_id != client.id:
            raise ValidationError(
                f"Order {order.id} does not belong to client {client.id}",
                code="order_client_mismatch",
                context={"order_id": order.id, "client_id": client.id},
            )

        if not client.referred_by:
            logger.debug(f"Client {client.id} has no pending referral; nothing to award")
            return AwardOutcome()

        if client.referred_by == client.id:
            logger.warning(f"⚠️ Client {client.id} is recorded as its own referrer; skipping award")
            return AwardOutcome()

        if referrer is None or referrer.id != client.referred_by:
            logger.warning(
                f"⚠️ Referrer {client.referred_by} for client {client.id} not found; "
                f"skipping award for order {order.id}"
            )
            return AwardOutcome()

        points = LoyaltyLedger.points_for_order(order)
        expiry = today + relativedelta(months=LOYALTY_POINT_VALIDITY_MONTHS)

        award = LoyaltyAward(
            client_id=referrer.id,
            order_id=order.id,
            points=points,
            status=LoyaltyAwardStatus.ACTIVE,
            date_earned=today,
            date_expiry=expiry,
            is_referral=True,
        )

        new_expiry = expiry
        if referrer.points_expiry and referrer.points_expiry > expiry:
            new_expiry = referrer.points_expiry

        logger.info(
            f"🎁 Referrer {referrer.id} earned {points} point(s) from order {order.id} "
            f"of referred client {client.id}"
        )
        return AwardOutcome(
            awards=[award],
            referrer_id=referrer.id,
            points_awarded=points,
            referrer_points=referrer.points + points,
            referrer_points_expiry=new_expiry,
            referral_consumed=True,
        )

    @staticmethod
    def eligible_units(client_units: Iterable[ServicedUnit], rule: PricingRule) -> list[ServicedUnit]:
        """Units priced at the client's minimum cleaning price (no discounts)"""
        calculator = PricingCalculator(rule)
        priced = [
            (unit, calculator.price_unit(unit.equipment_category, unit.capacity, ServiceCategory.CLEANING))
            for unit in client_units
        ]
        if not priced:
            return []

        min_price = min(price for _, price in priced)
        return [unit for unit, price in priced if price == min_price]

    @staticmethod
    def is_redeemable(unit: ServicedUnit, client_units: Iterable[ServicedUnit], rule: PricingRule) -> bool:
        """Only the cheapest unit(s) can be cleaned for free"""
        client_units = list(client_units)
        if not any(candidate.id == unit.id for candidate in client_units):
            return False
        return any(candidate.id == unit.id for candidate in LoyaltyLedger.eligible_units(client_units, rule))

    @staticmethod
    def spendable_awards(awards: Iterable[LoyaltyAward], today: date) -> list[LoyaltyAward]:
        """Active, unexpired awards, oldest first"""
        return sorted((a for a in awards if a.is_spendable(today)), key=lambda a: a.date_earned)

    @staticmethod
    def active_points(awards: Iterable[LoyaltyAward], today: date) -> int:
        return sum(award.points for award in LoyaltyLedger.spendable_awards(awards, today))

    @staticmethod
    def points_expiry(awards: Iterable[LoyaltyAward], today: date) -> Optional[date]:
        """Earliest expiry among spendable awards (soonest expiring points)"""
        expiries = [a.date_expiry for a in LoyaltyLedger.spendable_awards(awards, today) if a.date_expiry]
        return min(expiries) if expiries else None

    @staticmethod
    def plan_redemption(
        client: Client,
        unit: ServicedUnit,
        client_units: Iterable[ServicedUnit],
        awards: Iterable[LoyaltyAward],
        rule: PricingRule,
        scheduled_date: date,
        blackout_ranges: Iterable[BlackoutRange],
        today: date,
        client_orders: Iterable[Order] = (),
        point_cost: int = REDEMPTION_POINT_COST,
        order_id: Optional[str] = None,
    ) -> RedemptionPlan:
        """
        Plan a free cleaning paid for with loyalty points.

        Raises:
            ValidationError: unit not owned/eligible, bad date, yearly cap
                reached, or not enough spendable points
        """
        client_units = list(client_units)

        if unit.client_id != client.id:
            raise ValidationError(
                f"Unit {unit.id} does not belong to client {client.id}",
                code="unit_not_owned",
                context={"unit_id": unit.id, "client_id": client.id},
            )

        eligible = LoyaltyLedger.eligible_units(client_units, rule)
        if not eligible:
            raise ValidationError("Client has no units eligible for redemption", code="no_eligible_units")

        if not any(candidate.id == unit.id for candidate in eligible):
            raise ValidationError(
                "Only the lowest-priced unit can be redeemed",
                code="unit_not_eligible",
                context={"unit_id": unit.id, "eligible_unit_ids": [u.id for u in eligible]},
            )

        day = BlackoutValidator.validate_booking_date(scheduled_date, blackout_ranges, today)

        used_this_year = redemptions_in_year(client_orders, today.year)
        if used_this_year >= MAX_REDEMPTIONS_PER_YEAR:
            raise ValidationError(
                f"Redemption limit of {MAX_REDEMPTIONS_PER_YEAR} per year reached",
                code="redemption_limit_reached",
                context={"redemptions_this_year": used_this_year},
            )

        spendable = LoyaltyLedger.spendable_awards(awards, today)
        ledger_points = sum(award.points for award in spendable)
        if client.points < point_cost or ledger_points < point_cost:
            raise ValidationError(
                f"At least {point_cost} points are required to redeem a free cleaning",
                code="insufficient_points",
                context={"points": client.points, "spendable_points": ledger_points, "required": point_cost},
            )

        consumptions: list[AwardConsumption] = []
        redeemed_awards: list[LoyaltyAward] = []
        updated_awards: list[LoyaltyAward] = []
        remaining = point_cost

        for award in spendable:
            if remaining <= 0:
                break

            take = min(award.points, remaining)
            remaining -= take
            consumptions.append(
                AwardConsumption(award_id=award.id, points_consumed=take, remaining_points=award.points - take)
            )

            if take == award.points:
                redeemed_awards.append(award.model_copy(update={"status": LoyaltyAwardStatus.REDEEMED}))
            else:
                # Split: the used part becomes its own redeemed record
                redeemed_awards.append(
                    award.model_copy(update={"id": None, "points": take, "status": LoyaltyAwardStatus.REDEEMED})
                )
                updated_awards.append(award.model_copy(update={"points": award.points - take}))

        order = Order(
            id=order_id or generate_order_id(),
            client_id=client.id,
            location_id=unit.location_id,
            service_category=ServiceCategory.CLEANING,
            scheduled_date=day,
            status=OrderStatus.REDEEMED,
            amount=ZERO,
            unit_count=1,
            unit_ids=[unit.id],
            points_used=point_cost,
            notes="Redeemed free cleaning via loyalty points",
        )

        logger.info(f"✅ Planned redemption order {order.id} for client {client.id}, unit {unit.id} on {day}")
        return RedemptionPlan(
            order=order,
            unit_id=unit.id,
            points_used=point_cost,
            new_points_balance=client.points - point_cost,
            consumptions=consumptions,
            redeemed_awards=redeemed_awards,
            updated_awards=updated_awards,
        )
