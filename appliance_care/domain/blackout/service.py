"""
Blackout validation
Gates booking, rescheduling and redemption dates against admin blocked ranges
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from ...config import BOOKING_SEARCH_HORIZON_DAYS
from ...exceptions import ValidationError
from ...schemas import BlackoutRange
from ...shared.validators import to_calendar_date

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


def _normalize_candidate(candidate: Optional[DateLike]) -> date:
    try:
        normalized = to_calendar_date(candidate)
    except ValueError as e:
        raise ValidationError(str(e), code="date_invalid", context={"date": str(candidate)})

    if normalized is None:
        raise ValidationError("A service date is required", code="date_missing")
    return normalized


def _as_range(blocked) -> BlackoutRange:
    if isinstance(blocked, BlackoutRange):
        return blocked
    return BlackoutRange.model_validate(blocked)


class BlackoutValidator:
    """Calendar-day checks against blackout ranges; pure, no side effects"""

    @staticmethod
    def is_blocked(candidate_date: DateLike, ranges: Iterable[BlackoutRange]) -> Optional[BlackoutRange]:
        """
        Return the first range whose inclusive [from_date, to_date] contains
        the candidate day, or None.

        Overlapping ranges are matched in iteration order.
        """
        day = _normalize_candidate(candidate_date)

        for blocked in ranges:
            blocked = _as_range(blocked)
            if blocked.from_date <= day <= blocked.to_date:
                return blocked
        return None

    @staticmethod
    def validate_booking_date(
        candidate_date: DateLike, ranges: Iterable[BlackoutRange], today: date
    ) -> date:
        """
        Validate a proposed service date.

        Same-day and past bookings are never permitted, and the date must not
        fall inside a blackout range.

        Returns:
            The candidate normalized to a calendar date

        Raises:
            ValidationError: code "date_not_in_future" or "date_blocked"
        """
        day = _normalize_candidate(candidate_date)
        today = to_calendar_date(today)

        if day <= today:
            raise ValidationError(
                "Service date must be after today",
                code="date_not_in_future",
                context={"date": day.isoformat(), "today": today.isoformat()},
            )

        blocked = BlackoutValidator.is_blocked(day, ranges)
        if blocked is not None:
            logger.info(f"🚫 Booking date {day} rejected by blackout '{blocked.name}' ({blocked.id})")
            raise ValidationError(
                f"{day.isoformat()} is unavailable: {blocked.name}",
                code="date_blocked",
                context={
                    "date": day.isoformat(),
                    "blackout_id": blocked.id,
                    "blackout_name": blocked.name,
                    "from_date": blocked.from_date.isoformat(),
                    "to_date": blocked.to_date.isoformat(),
                    "reason": blocked.reason,
                },
            )

        return day

    @staticmethod
    def next_available_date(
        after: DateLike,
        ranges: Iterable[BlackoutRange],
        horizon_days: int = BOOKING_SEARCH_HORIZON_DAYS,
    ) -> Optional[date]:
        """
        First day strictly after `after` that no range blocks.

        Returns None if every day within the horizon is blocked.
        """
        start = _normalize_candidate(after)
        ranges = [_as_range(r) for r in ranges]
        limit = start + timedelta(days=horizon_days)

        day = start + timedelta(days=1)
        while day <= limit:
            blocked = BlackoutValidator.is_blocked(day, ranges)
            if blocked is None:
                return day
            # Skip past the whole blocking range
            day = blocked.to_date + timedelta(days=1)
        return None
