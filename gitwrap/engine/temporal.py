"""Weekday and time-of-day patterns derived from a daily calendar.

GitHub only exposes day-level counts, so `best_hour` is a fixed heuristic
over the weekday/weekend split and the average volume of active days. Its
breakpoints are configuration, not measurements.
"""

from collections.abc import Sequence

from gitwrap.engine.calendar import weekday_index
from gitwrap.engine.models import ContributionDay

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
NOT_ENOUGH_DATA = "Not enough data"

DEFAULT_HOUR = 14
STRONG_WEEKDAY_RATIO = 0.75
WEEKDAY_RATIO = 0.60
HEAVY_WEEKDAY_VOLUME = 10
HEAVY_WEEKEND_VOLUME = 5


def weekday_totals(calendar: Sequence[ContributionDay]) -> list[int]:
    """Sum contribution counts per weekday, Sunday first."""

    totals = [0] * 7
    for day in calendar:
        totals[weekday_index(day.date)] += day.count
    return totals


def best_day_of_week(calendar: Sequence[ContributionDay]) -> str:
    """Name the weekday with the highest total; the lower index wins ties."""

    totals = weekday_totals(calendar)
    best_total = max(totals)
    if best_total == 0:
        return NOT_ENOUGH_DATA
    return DAY_NAMES[totals.index(best_total)]


def best_hour(calendar: Sequence[ContributionDay]) -> int:
    """Estimate a representative hour of day from the weekly rhythm."""

    total = sum(day.count for day in calendar)
    if total == 0:
        return DEFAULT_HOUR

    totals = weekday_totals(calendar)
    weekday_ratio = sum(totals[1:6]) / total

    active_days = sum(1 for day in calendar if day.count > 0)
    average_active_volume = total / max(active_days, 1)

    if weekday_ratio > STRONG_WEEKDAY_RATIO:
        return 14 if average_active_volume > HEAVY_WEEKDAY_VOLUME else 11
    if weekday_ratio > WEEKDAY_RATIO:
        return 15
    return 22 if average_active_volume > HEAVY_WEEKEND_VOLUME else 16
