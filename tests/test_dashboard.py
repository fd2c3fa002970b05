"""
Tests for the dashboard queries over the in-memory repository.
"""

from datetime import date

from appliance_care.domain.lifecycle import UnitStatus
from appliance_care.schemas import OrderStatus
from appliance_care.services import DashboardService


class TestDashboardService:
    def test_statuses_for_client(self, repo, clock, make_unit, make_order):
        repo.add_unit(make_unit("u1", last_service_date=date(2024, 1, 1)))
        repo.add_unit(make_unit("u2", last_service_date=date(2024, 1, 1)))
        repo.add_unit(make_unit("u3"))
        repo.add_unit(make_unit("other", client_id="client-2"))
        # One order linked to two units is seen once per unit but counted once
        repo.add_order(make_order("o1", unit_ids=["u1", "u2"], status=OrderStatus.CONFIRMED))
        repo.add_order(make_order("o2", unit_ids=["u2"], service_category="repair", status=OrderStatus.PENDING))

        views = DashboardService(repo, clock).statuses_for_client("client-1")

        assert {view.unit_id: view.status for view in views} == {
            "u1": UnitStatus.SCHEDULED,
            "u2": UnitStatus.SCHEDULED,
            "u3": UnitStatus.NO_SERVICE,
        }

    def test_repair_view(self, repo, clock, make_unit, make_order):
        repo.add_unit(make_unit("u1", last_service_date=date(2024, 1, 1)))
        repo.add_order(make_order("o1", unit_ids=["u1"], service_category="repair", status=OrderStatus.VOIDED))

        service = DashboardService(repo, clock)

        assert service.statuses_for_client("client-1", "repair")[0].status is UnitStatus.VOIDED
        assert service.statuses_for_client("client-1")[0].status is UnitStatus.DUE

    def test_legacy_unserviced_flag(self, repo, clock, make_unit):
        repo.add_unit(make_unit("u1"))
        views = DashboardService(repo, clock).statuses_for_client("client-1", treat_unserviced_as_scheduled=True)
        assert views[0].status is UnitStatus.SCHEDULED

    def test_location_summary(self, repo, clock, make_unit):
        repo.add_unit(make_unit("u1", last_service_date=date(2024, 1, 1)))
        repo.add_unit(make_unit("u2", last_service_date=date(2025, 5, 1), location_id="loc-2"))

        summaries = DashboardService(repo, clock).location_summary("client-1")

        assert [(s.location_id, s.count(UnitStatus.DUE), s.count(UnitStatus.UP_TO_DATE)) for s in summaries] == [
            ("loc-1", 1, 0),
            ("loc-2", 0, 1),
        ]
