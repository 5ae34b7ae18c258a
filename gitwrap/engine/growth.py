import math

from gitwrap.engine.models import YearOverYearGrowth
from gitwrap.engine.models import YearTotals

MIN_PRIOR_TOTAL = 10


def growth_percent(current: int, prior: int) -> int:
    """Percentage change from `prior` to `current`, rounded half up."""

    if prior == 0:
        return 100 if current > 0 else 0
    return math.floor(100 * (current - prior) / prior + 0.5)


def compare_growth(
    current: YearTotals,
    prior: YearTotals,
    min_prior_total: int = MIN_PRIOR_TOTAL,
) -> YearOverYearGrowth | None:
    """Year-over-year change per metric.

    Returns None when the prior year has too little activity for a
    percentage to mean anything.
    """

    if prior.volume < min_prior_total:
        return None

    return YearOverYearGrowth(
        commits_growth=growth_percent(current.commits, prior.commits),
        prs_growth=growth_percent(current.prs, prior.prs),
        issues_growth=growth_percent(current.issues, prior.issues),
        overall_growth=growth_percent(current.volume, prior.volume),
    )
