from .status import (
    VALID_TRANSITIONS,
    counts_as_revenue,
    redemptions_in_year,
    revenue_total,
    transition,
    validate_status_transition,
)

__all__ = [
    "VALID_TRANSITIONS",
    "counts_as_revenue",
    "redemptions_in_year",
    "revenue_total",
    "transition",
    "validate_status_transition",
]
