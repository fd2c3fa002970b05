"""Loyalty domain schemas"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ...schemas import LoyaltyAward, Order


class AwardOutcome(BaseModel):
    """
    What the host must persist after a completed order.

    An empty outcome (no awards, referral_consumed False) is a no-op.
    """

    awards: list[LoyaltyAward] = Field(default_factory=list)
    referrer_id: Optional[str] = None
    points_awarded: int = 0
    referrer_points: Optional[int] = None  # referrer's balance after the award
    referrer_points_expiry: Optional[date] = None
    referral_consumed: bool = False  # clear referred_by on the ordering client

    @property
    def is_noop(self) -> bool:
        return not self.awards and not self.referral_consumed


class AwardConsumption(BaseModel):
    award_id: Optional[str] = None
    points_consumed: int
    remaining_points: int


class RedemptionPlan(BaseModel):
    """A zero-cost redemption order and the ledger changes that pay for it"""

    order: Order
    unit_id: str
    points_used: int
    new_points_balance: int
    consumptions: list[AwardConsumption] = Field(default_factory=list)
    redeemed_awards: list[LoyaltyAward] = Field(default_factory=list)  # to insert / mark redeemed
    updated_awards: list[LoyaltyAward] = Field(default_factory=list)  # partially used, still active
