from collections.abc import Sequence
from datetime import date
from datetime import timedelta

from gitwrap.engine.calendar import weekday_index
from gitwrap.engine.models import ContributionDay
from gitwrap.engine.models import HeatmapWeek

MONTH_LABELS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
PLACEHOLDER_WEEKS = 52


def contribution_level(count: int) -> int:
    """Map daily contribution count to a heatmap level in range 0..4."""

    if count <= 0:
        return 0
    if count <= 2:
        return 1
    if count <= 5:
        return 2
    if count <= 10:
        return 3
    return 4


def placeholder_weeks() -> list[HeatmapWeek]:
    return [HeatmapWeek(days=[0] * 7) for _ in range(PLACEHOLDER_WEEKS)]


def build_heatmap_weeks(calendar: Sequence[ContributionDay]) -> list[HeatmapWeek]:
    """Group contribution days into Sunday-first week columns of levels.

    Days missing from a column are level 0. A column is labelled with the
    month of its first day only when that month differs from the previous
    column's. When a date repeats, the later entry wins. An empty calendar
    gives a blank full-year grid.
    """

    if not calendar:
        return placeholder_weeks()

    # (week start, month of first day, levels) per column.
    columns: list[tuple[date, int, list[int]]] = []
    for day in sorted(calendar, key=lambda day: day.date):
        weekday = weekday_index(day.date)
        week_start = day.date - timedelta(days=weekday)
        if not columns or columns[-1][0] != week_start:
            columns.append((week_start, day.date.month, [0] * 7))
        columns[-1][2][weekday] = contribution_level(day.count)

    weeks: list[HeatmapWeek] = []
    previous_month: int | None = None
    for _, month, levels in columns:
        label = MONTH_LABELS[month - 1] if month != previous_month else ""
        weeks.append(HeatmapWeek(month_label=label, days=levels))
        previous_month = month

    return weeks
