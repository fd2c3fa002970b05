"""
Data-access interface the engine consumes.

The host implements this against its store (e.g. a hosted Postgres); the
engine never performs I/O itself. Implementations must
serve each service call from one consistent snapshot of the unit/order tables.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional

from .domain.pricing.schemas import PricingRule
from .schemas import BlackoutRange, Client, LoyaltyAward, Order, OrderStatus, ServicedUnit


class MaintenanceRepository(ABC):
    # Reads

    @abstractmethod
    def get_client(self, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    def get_units_by_client(self, client_id: str) -> list[ServicedUnit]:
        pass

    @abstractmethod
    def get_units_for_order(self, order_id: str) -> list[ServicedUnit]:
        pass

    @abstractmethod
    def get_orders_linked_to_unit(self, unit_id: str) -> list[Order]:
        pass

    @abstractmethod
    def get_orders_by_client(self, client_id: str) -> list[Order]:
        pass

    @abstractmethod
    def get_active_pricing_rules(self) -> Optional[PricingRule]:
        pass

    @abstractmethod
    def get_blackout_ranges(self) -> list[BlackoutRange]:
        """Ranges ordered by from_date ascending"""
        pass

    @abstractmethod
    def get_loyalty_awards(self, client_id: str) -> list[LoyaltyAward]:
        pass

    # Writes

    @abstractmethod
    def update_unit(self, unit: ServicedUnit) -> ServicedUnit:
        """Persist last_service_date, last_repair_date and the three due-dates"""
        pass

    @abstractmethod
    def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        pass

    @abstractmethod
    def update_order_schedule(self, order_id: str, scheduled_date: date) -> Order:
        pass

    @abstractmethod
    def create_order(self, order: Order) -> Order:
        pass

    @abstractmethod
    def update_client_points(self, client_id: str, points: int, points_expiry: Optional[date]) -> Client:
        pass

    @abstractmethod
    def create_loyalty_award(self, award: LoyaltyAward) -> LoyaltyAward:
        pass

    @abstractmethod
    def update_loyalty_awards(self, awards: Iterable[LoyaltyAward]) -> None:
        """Save status/points changes of existing awards"""
        pass

    @abstractmethod
    def mark_referral_consumed(self, client_id: str) -> None:
        """Clear referred_by on the client"""
        pass
