"""
Order status transitions
Orders move forward only: pending → confirmed → completed, with void allowed
until the visit is completed. Redemption orders are created as 'redeemed'.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Union

from ...exceptions import ValidationError
from ...schemas import Order, OrderStatus
from ...shared.money import ZERO, quantize

logger = logging.getLogger(__name__)

VALID_TRANSITIONS = {
    OrderStatus.PENDING: [OrderStatus.CONFIRMED, OrderStatus.VOIDED],
    OrderStatus.CONFIRMED: [OrderStatus.COMPLETED, OrderStatus.VOIDED],
    OrderStatus.COMPLETED: [],  # Terminal state
    OrderStatus.VOIDED: [],  # Terminal state
    OrderStatus.REDEEMED: [],  # Terminal state
}


def validate_status_transition(
    current_status: Union[OrderStatus, str], new_status: Union[OrderStatus, str]
) -> bool:
    """
    Validate if an order status transition is allowed

    Args:
        current_status: Current order status
        new_status: Desired new status

    Returns:
        bool: True if transition is valid, False otherwise
    """
    current_status = OrderStatus(current_status)
    new_status = OrderStatus(new_status)

    # Allow same status (no-op)
    if current_status == new_status:
        return True

    return new_status in VALID_TRANSITIONS.get(current_status, [])


def transition(order: Order, new_status: Union[OrderStatus, str]) -> Order:
    """
    Return a copy of the order in its new status.

    Raises:
        ValidationError: If the transition would move the order backwards
    """
    try:
        new_status = OrderStatus(new_status)
    except ValueError:
        raise ValidationError(f"Unknown order status: {new_status!r}", code="status_invalid")

    if not validate_status_transition(order.status, new_status):
        raise ValidationError(
            f"Order {order.id} cannot move from {order.status.value} to {new_status.value}",
            code="status_transition_invalid",
            context={"order_id": order.id, "from": order.status.value, "to": new_status.value},
        )

    if order.status != new_status:
        logger.info(f"✅ Order {order.id} transitioned: {order.status.value} → {new_status.value}")
    return order.model_copy(update={"status": new_status})


def counts_as_revenue(order: Order) -> bool:
    """Only completed paid visits are revenue; redemptions are free"""
    return order.status == OrderStatus.COMPLETED


def revenue_total(orders: Iterable[Order]) -> Decimal:
    return quantize(sum((order.amount for order in orders if counts_as_revenue(order)), ZERO))


def redeemed_on(order: Order) -> date:
    """Day the redemption was made; the visit date when no creation time is recorded"""
    if order.created_at is not None:
        return order.created_at.date()
    return order.scheduled_date


def redemptions_in_year(orders: Iterable[Order], year: int) -> int:
    """Redemptions made during the year, regardless of when the free visit takes place"""
    return sum(1 for order in orders if order.status == OrderStatus.REDEEMED and redeemed_on(order).year == year)
