from collections.abc import Iterable

from gitwrap.engine.models import ContributionDay


def longest_streak(calendar: Iterable[ContributionDay]) -> int:
    """Return the longest run of consecutive entries with a nonzero count.

    Entries are trusted to be one per day in chronological order, which
    `normalize_calendar` guarantees.
    """

    max_streak = 0
    current_streak = 0
    for day in calendar:
        if day.count > 0:
            current_streak += 1
            max_streak = max(max_streak, current_streak)
        else:
            current_streak = 0

    return max_streak
