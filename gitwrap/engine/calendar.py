from collections.abc import Iterable
from collections.abc import Sequence
from datetime import date
from datetime import timedelta

from gitwrap.engine.models import ContributionDay
from gitwrap.engine.models import ContributionWeek


def weekday_index(day: date) -> int:
    """Return the weekday with Sunday as 0 and Saturday as 6."""

    return (day.weekday() + 1) % 7


def normalize_calendar(
    weeks: Iterable[ContributionWeek], year: int
) -> list[ContributionDay]:
    """Flatten weekly contribution groups into one entry per day of `year`.

    Days outside `year` are dropped and missing days are filled with a zero
    count, so the result is contiguous from January 1 to December 31. When
    the input holds no day of `year` at all the result is empty.
    """

    counts_by_date: dict[date, int] = {}
    for week in weeks:
        for day in week.contribution_days:
            if day.date.year == year:
                counts_by_date[day.date] = day.count

    if not counts_by_date:
        return []

    days: list[ContributionDay] = []
    current_day = date(year, 1, 1)
    last_day = date(year, 12, 31)
    while current_day <= last_day:
        days.append(
            ContributionDay(date=current_day, count=counts_by_date.get(current_day, 0))
        )
        current_day += timedelta(days=1)

    return days


def is_contiguous(calendar: Sequence[ContributionDay]) -> bool:
    """Check that every entry falls exactly one day after the previous one."""

    return all(
        current.date - previous.date == timedelta(days=1)
        for previous, current in zip(calendar, calendar[1:])
    )
