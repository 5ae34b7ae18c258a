"""Assemble a `YearSummary` from one fetched user record.

Every value is derived from `record` and the single `now` passed in, so the
same inputs always give the same summary.
"""

import math
from datetime import datetime

from gitwrap.engine.calendar import normalize_calendar
from gitwrap.engine.growth import MIN_PRIOR_TOTAL
from gitwrap.engine.growth import compare_growth
from gitwrap.engine.languages import aggregate_languages
from gitwrap.engine.models import GitHubUserRecord
from gitwrap.engine.models import YearSummary
from gitwrap.engine.repositories import rank_repositories
from gitwrap.engine.streak import longest_streak
from gitwrap.engine.temporal import best_day_of_week
from gitwrap.engine.temporal import best_hour

SECONDS_PER_YEAR = 365 * 24 * 60 * 60


def years_since(created_at: datetime, now: datetime) -> int:
    """Whole 365-day years elapsed between account creation and `now`."""

    elapsed = (now - created_at).total_seconds()
    return max(math.floor(elapsed / SECONDS_PER_YEAR), 0)


def build_year_summary(
    record: GitHubUserRecord,
    year: int,
    now: datetime,
    top_languages: int = 3,
    top_repos: int = 5,
    min_prior_total: int = MIN_PRIOR_TOTAL,
) -> YearSummary:
    current = record.current_year
    calendar = normalize_calendar(current.weeks, year)

    return YearSummary(
        login=record.login,
        name=record.name,
        avatar_url=record.avatar_url,
        year=year,
        total_contributions=sum(day.count for day in calendar),
        total_commits=current.totals.commits,
        total_prs=current.totals.prs,
        total_issues=current.totals.issues,
        total_pr_reviews=current.totals.pr_reviews,
        total_stars_given=sum(repo.stargazers for repo in record.owned_repositories),
        total_repositories=len(record.owned_repositories),
        top_languages=aggregate_languages(current.repositories, top_n=top_languages),
        top_repos=rank_repositories(current.repositories, top_n=top_repos),
        longest_streak_days=longest_streak(calendar),
        best_day_of_week=best_day_of_week(calendar),
        best_hour=best_hour(calendar),
        contribution_calendar=calendar,
        github_anniversary=years_since(record.created_at, now),
        year_over_year_growth=compare_growth(
            current.totals, record.prior_year.totals, min_prior_total=min_prior_total
        ),
    )
