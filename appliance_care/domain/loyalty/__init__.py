from .schemas import AwardConsumption, AwardOutcome, RedemptionPlan
from .service import LoyaltyLedger

__all__ = ["AwardConsumption", "AwardOutcome", "LoyaltyLedger", "RedemptionPlan"]
