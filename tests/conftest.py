"""
Shared fixtures: a pinned clock, a pricing snapshot and an in-memory repository.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from appliance_care.clock import FixedClock
from appliance_care.domain.pricing.schemas import PricingRule
from appliance_care.repository import MaintenanceRepository
from appliance_care.schemas import BlackoutRange, Client, LoyaltyAward, Order, ServicedUnit

TODAY = date(2025, 6, 15)


class InMemoryRepository(MaintenanceRepository):
    """Dictionary-backed repository recording every write"""

    def __init__(self, rule=None):
        self.rule = rule
        self.clients: dict[str, Client] = {}
        self.units: dict[str, ServicedUnit] = {}
        self.orders: dict[str, Order] = {}
        self.awards: list[LoyaltyAward] = []
        self.blackouts: list[BlackoutRange] = []
        self.consumed_referrals: list[str] = []
        self._award_seq = 0

    # Seeding helpers

    def add_client(self, client: Client) -> Client:
        self.clients[client.id] = client
        return client

    def add_unit(self, unit: ServicedUnit) -> ServicedUnit:
        self.units[unit.id] = unit
        return unit

    def add_order(self, order: Order) -> Order:
        self.orders[order.id] = order
        return order

    def add_award(self, award: LoyaltyAward) -> LoyaltyAward:
        return self.create_loyalty_award(award)

    # Reads

    def get_client(self, client_id):
        return self.clients.get(client_id)

    def get_order(self, order_id):
        return self.orders.get(order_id)

    def get_units_by_client(self, client_id):
        return [unit for unit in self.units.values() if unit.client_id == client_id]

    def get_units_for_order(self, order_id):
        order = self.orders.get(order_id)
        if not order:
            return []
        return [self.units[unit_id] for unit_id in order.unit_ids if unit_id in self.units]

    def get_orders_linked_to_unit(self, unit_id):
        return [order for order in self.orders.values() if order.includes_unit(unit_id)]

    def get_orders_by_client(self, client_id):
        return [order for order in self.orders.values() if order.client_id == client_id]

    def get_active_pricing_rules(self):
        return self.rule

    def get_blackout_ranges(self):
        return sorted(self.blackouts, key=lambda r: r.from_date)

    def get_loyalty_awards(self, client_id):
        return [award for award in self.awards if award.client_id == client_id]

    # Writes

    def update_unit(self, unit):
        self.units[unit.id] = unit
        return unit

    def update_order_status(self, order_id, status):
        order = self.orders[order_id].model_copy(update={"status": status})
        self.orders[order_id] = order
        return order

    def update_order_schedule(self, order_id, scheduled_date):
        order = self.orders[order_id].model_copy(update={"scheduled_date": scheduled_date})
        self.orders[order_id] = order
        return order

    def create_order(self, order):
        self.orders[order.id] = order
        return order

    def update_client_points(self, client_id, points, points_expiry):
        client = self.clients[client_id].model_copy(update={"points": points, "points_expiry": points_expiry})
        self.clients[client_id] = client
        return client

    def create_loyalty_award(self, award):
        if award.id is None:
            self._award_seq += 1
            award = award.model_copy(update={"id": f"award-{self._award_seq}"})
        self.awards.append(award)
        return award

    def update_loyalty_awards(self, awards):
        by_id = {award.id: award for award in awards}
        self.awards = [by_id.get(award.id, award) for award in self.awards]

    def mark_referral_consumed(self, client_id):
        self.consumed_referrals.append(client_id)
        self.clients[client_id] = self.clients[client_id].model_copy(update={"referred_by": None})


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 6, 15, 9, 30))


@pytest.fixture
def pricing_rule():
    return PricingRule(
        split_type_price=Decimal("500"),
        window_type_price=Decimal("400"),
        surcharge=Decimal("300"),
        repair_price=Decimal("800"),
        discount=Decimal("10"),
        relationship_discount=Decimal("15"),
    )


@pytest.fixture
def make_unit():
    def _make(unit_id="unit-1", client_id="client-1", **overrides):
        fields = {
            "id": unit_id,
            "client_id": client_id,
            "location_id": "loc-1",
            "brand": "Carrier",
            "equipment_category": "Split Type",
            "capacity": Decimal("1.0"),
        }
        fields.update(overrides)
        return ServicedUnit(**fields)

    return _make


@pytest.fixture
def make_order():
    def _make(order_id="order-1", client_id="client-1", unit_ids=("unit-1",), **overrides):
        fields = {
            "id": order_id,
            "client_id": client_id,
            "location_id": "loc-1",
            "service_category": "cleaning",
            "scheduled_date": TODAY,
            "unit_ids": list(unit_ids),
        }
        fields.update(overrides)
        return Order(**fields)

    return _make


@pytest.fixture
def repo(pricing_rule):
    return InMemoryRepository(rule=pricing_rule)
