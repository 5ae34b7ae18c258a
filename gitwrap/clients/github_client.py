from collections.abc import Mapping
from datetime import datetime
from typing import Any

import httpx

from gitwrap.engine.models import ContributionDay
from gitwrap.engine.models import ContributionWeek
from gitwrap.engine.models import ContributionYear
from gitwrap.engine.models import GitHubUserRecord
from gitwrap.engine.models import Language
from gitwrap.engine.models import OwnedRepository
from gitwrap.engine.models import RepositoryContribution
from gitwrap.engine.models import YearTotals

USER_AGENT = "gitwrap"

YEAR_SUMMARY_QUERY = """
query YearSummary(
  $login: String!,
  $fromCurrent: DateTime!, $toCurrent: DateTime!,
  $fromPrior: DateTime!, $toPrior: DateTime!
) {
  user(login: $login) {
    login
    name
    avatarUrl
    createdAt
    currentYear: contributionsCollection(from: $fromCurrent, to: $toCurrent) {
      totalCommitContributions
      totalIssueContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
      commitContributionsByRepository(maxRepositories: 100) {
        repository {
          name
          url
          stargazerCount
          primaryLanguage {
            name
            color
          }
        }
        contributions {
          totalCount
        }
      }
    }
    priorYear: contributionsCollection(from: $fromPrior, to: $toPrior) {
      totalCommitContributions
      totalIssueContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
    }
    repositories(
      first: 100, ownerAffiliations: OWNER,
      orderBy: {field: STARGAZERS, direction: DESC}
    ) {
      nodes {
        name
        url
        stargazerCount
        primaryLanguage {
          name
          color
        }
      }
    }
  }
}
"""


class GitHubGraphQLError(ValueError):
    """Raised when GitHub answers with a GraphQL `errors` list."""

    def __init__(self, message: str, error_type: str | None = None) -> None:
        super().__init__(message)
        self.error_type = error_type


class GitHubUserMissingError(ValueError):
    """Raised when the GraphQL response has no user for the login."""


def year_window(year: int) -> tuple[str, str]:
    return f"{year}-01-01T00:00:00Z", f"{year}-12-31T23:59:59Z"


def fetch_year_record(
    username: str,
    year: int,
    token: str | None,
    graphql_url: str,
) -> GitHubUserRecord:
    """Fetch one user's activity for `year` and the year before it."""

    from_current, to_current = year_window(year)
    from_prior, to_prior = year_window(year - 1)
    variables = {
        "login": username,
        "fromCurrent": from_current,
        "toCurrent": to_current,
        "fromPrior": from_prior,
        "toPrior": to_prior,
    }
    headers = {
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"

    response = httpx.post(
        graphql_url,
        json={"query": YEAR_SUMMARY_QUERY, "variables": variables},
        headers=headers,
        timeout=20.0,
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub GraphQL response is invalid")

    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        first_error = errors[0] if isinstance(errors[0], Mapping) else {}
        raise GitHubGraphQLError(
            str(first_error.get("message") or "GitHub GraphQL returned errors"),
            error_type=first_error.get("type"),
        )

    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise ValueError("GitHub GraphQL data is missing")

    user = data.get("user")
    if not isinstance(user, Mapping):
        raise GitHubUserMissingError("GitHub user not found")

    return parse_user_record(user)


def parse_user_record(user: Mapping[str, Any]) -> GitHubUserRecord:
    """Convert the GraphQL `user` object into the engine's input record."""

    raw_login = user.get("login")
    raw_created_at = user.get("createdAt")
    if not isinstance(raw_login, str) or not raw_login:
        raise ValueError("GitHub user response is missing login")
    if not isinstance(raw_created_at, str):
        raise ValueError("GitHub user response is missing createdAt")

    current = _mapping(user.get("currentYear"))
    prior = _mapping(user.get("priorYear"))
    repositories = _mapping(user.get("repositories"))

    return GitHubUserRecord(
        login=raw_login,
        name=user.get("name") if isinstance(user.get("name"), str) else None,
        avatar_url=str(user.get("avatarUrl") or ""),
        created_at=datetime.fromisoformat(raw_created_at.replace("Z", "+00:00")),
        current_year=ContributionYear(
            totals=_parse_totals(current),
            weeks=_parse_weeks(current),
            repositories=_parse_repository_contributions(current),
        ),
        prior_year=ContributionYear(totals=_parse_totals(prior)),
        owned_repositories=[
            OwnedRepository(
                name=node["name"],
                url=node["url"],
                stargazers=_int(node.get("stargazerCount")),
                language=_parse_language(node.get("primaryLanguage")),
            )
            for node in _list_of_mappings(repositories.get("nodes"))
            if isinstance(node.get("name"), str) and isinstance(node.get("url"), str)
        ],
    )


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _list_of_mappings(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _int(value: Any) -> int:
    return value if isinstance(value, int) and value > 0 else 0


def _parse_totals(collection: Mapping[str, Any]) -> YearTotals:
    return YearTotals(
        commits=_int(collection.get("totalCommitContributions")),
        issues=_int(collection.get("totalIssueContributions")),
        prs=_int(collection.get("totalPullRequestContributions")),
        pr_reviews=_int(collection.get("totalPullRequestReviewContributions")),
    )


def _parse_weeks(collection: Mapping[str, Any]) -> list[ContributionWeek]:
    calendar = _mapping(collection.get("contributionCalendar"))
    weeks: list[ContributionWeek] = []
    for week in _list_of_mappings(calendar.get("weeks")):
        days: list[ContributionDay] = []
        for item in _list_of_mappings(week.get("contributionDays")):
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            if isinstance(raw_date, str) and isinstance(raw_count, int):
                days.append(ContributionDay(date=raw_date, count=max(raw_count, 0)))
        weeks.append(ContributionWeek(contribution_days=days))
    return weeks


def _parse_language(value: Any) -> Language | None:
    if not isinstance(value, Mapping) or not isinstance(value.get("name"), str):
        return None
    color = value.get("color")
    return Language(name=value["name"], color=color if isinstance(color, str) else None)


def _parse_repository_contributions(
    collection: Mapping[str, Any],
) -> list[RepositoryContribution]:
    contributions: list[RepositoryContribution] = []
    for item in _list_of_mappings(collection.get("commitContributionsByRepository")):
        repository = _mapping(item.get("repository"))
        name = repository.get("name")
        url = repository.get("url")
        if not isinstance(name, str) or not isinstance(url, str):
            continue
        contributions.append(
            RepositoryContribution(
                name=name,
                url=url,
                stargazers=_int(repository.get("stargazerCount")),
                language=_parse_language(repository.get("primaryLanguage")),
                contributions=_int(_mapping(item.get("contributions")).get("totalCount")),
            )
        )
    return contributions
