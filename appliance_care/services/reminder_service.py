"""
Cleaning reminder digests
Collects the units whose 3/4/6-month mark falls today, one digest per client
grouped by location. Sending the message is left to the host.
"""

import logging
from collections import OrderedDict
from datetime import date
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from ..domain.schedule.schemas import DueTier
from ..domain.schedule.service import MaintenanceScheduleCalculator
from ..schemas import Client, ServicedUnit

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown location"
UNIT_DETAILS_PLACEHOLDER = "{location}\n{no_of_units} {brand} {types} {horsepower} - {due_date}"


class ReminderLine(BaseModel):
    unit_id: str
    tier: DueTier
    description: str


class LocationReminder(BaseModel):
    location_id: Optional[str] = None
    location_name: str
    lines: list[ReminderLine] = Field(default_factory=list)


class ReminderDigest(BaseModel):
    """Everything due today for one client"""

    client_id: str
    client_name: str
    locations: list[LocationReminder] = Field(default_factory=list)

    @property
    def total_units(self) -> int:
        return sum(len(location.lines) for location in self.locations)

    def unit_details(self) -> str:
        blocks = []
        for location in self.locations:
            blocks.append("\n".join([location.location_name] + [line.description for line in location.lines]))
        return "\n\n".join(blocks)


def describe_unit(unit: ServicedUnit, tier: DueTier) -> str:
    capacity = f"{unit.capacity} HP" if unit.capacity is not None else ""
    parts = [part for part in ("1x", unit.brand, unit.equipment_category, capacity) if part]
    return f"{' '.join(parts)} - {tier.label}"


class ReminderService:
    @staticmethod
    def build_due_reminders(
        units: Iterable[ServicedUnit],
        clients: Iterable[Client],
        today: date,
        location_names: Optional[Mapping[str, str]] = None,
    ) -> list[ReminderDigest]:
        """
        Build one digest per client that has a unit reaching a due mark today.

        Units of clients that are not in `clients` are skipped (the host only
        passes clients it can reach).
        """
        location_names = location_names or {}
        clients_by_id = {client.id: client for client in clients}
        digests: "OrderedDict[str, ReminderDigest]" = OrderedDict()
        skipped = 0

        for unit in units:
            tier = MaintenanceScheduleCalculator.due_today(unit, today)
            if tier is None:
                continue

            client = clients_by_id.get(unit.client_id)
            if client is None:
                skipped += 1
                continue

            digest = digests.setdefault(
                client.id, ReminderDigest(client_id=client.id, client_name=client.name or "Customer")
            )

            location = next((loc for loc in digest.locations if loc.location_id == unit.location_id), None)
            if location is None:
                location = LocationReminder(
                    location_id=unit.location_id,
                    location_name=location_names.get(unit.location_id, UNKNOWN_LOCATION),
                )
                digest.locations.append(location)

            location.lines.append(ReminderLine(unit_id=unit.id, tier=tier, description=describe_unit(unit, tier)))

        if skipped:
            logger.warning(f"⚠️ Skipped {skipped} due unit(s) with no reachable client")
        logger.info(f"📊 Built {len(digests)} reminder digest(s) for {today}")
        return list(digests.values())

    @staticmethod
    def render_message(template: str, digest: ReminderDigest) -> str:
        """
        Fill the admin reminder template.

        Supported placeholders: {0} (client name), {total_units}, {client_id},
        and the unit-details block placeholder.
        """
        return (
            template.replace("{0}", digest.client_name)
            .replace("{total_units}", str(digest.total_units))
            .replace("{client_id}", digest.client_id)
            .replace(UNIT_DETAILS_PLACEHOLDER, digest.unit_details())
        )
