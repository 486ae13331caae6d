"""Pay period and earnings engine."""

from paytrack.calculators.earnings import (
    can_submit,
    detailed_breakdown,
    full_period_summary,
    preview_up_to_today,
    round_to_cents,
    summarize,
)
from paytrack.calculators.periods import (
    InvalidDateError,
    InvalidOffsetError,
    format_for_storage,
    label,
    period_by_offset,
    period_containing,
)
from paytrack.calculators.types import (
    DayDetail,
    EarningsSummary,
    EmployeeRates,
    PayPeriod,
    PeriodBreakdown,
    TimeEntryRecord,
)

__all__ = [
    "InvalidDateError",
    "InvalidOffsetError",
    "period_containing",
    "period_by_offset",
    "format_for_storage",
    "label",
    "summarize",
    "detailed_breakdown",
    "full_period_summary",
    "preview_up_to_today",
    "can_submit",
    "round_to_cents",
    "DayDetail",
    "EarningsSummary",
    "EmployeeRates",
    "PayPeriod",
    "PeriodBreakdown",
    "TimeEntryRecord",
]
