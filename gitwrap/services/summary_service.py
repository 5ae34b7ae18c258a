import logging
from dataclasses import dataclass
from datetime import UTC
from datetime import datetime

import httpx
from sqlalchemy.orm import Session

from gitwrap.clients.github_client import GitHubGraphQLError
from gitwrap.clients.github_client import GitHubUserMissingError
from gitwrap.clients.github_client import fetch_year_record
from gitwrap.engine.models import GitHubUserRecord
from gitwrap.engine.models import YearSummary
from gitwrap.engine.summary import build_year_summary
from gitwrap.services.cache_service import get_cached_summary
from gitwrap.services.cache_service import set_cached_summary
from gitwrap.settings import Settings

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Raised when GitHub requests fail for non-auth reasons."""


class GitHubUserNotFoundError(GitHubAPIError):
    """Raised when GitHub has no user with the requested login."""


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub refuses the request because of rate limiting."""


class InvalidGitHubTokenError(GitHubAPIError):
    """Raised when GitHub rejects the provided token."""


class GitHubTokenMissingError(InvalidGitHubTokenError):
    """Raised when GitHub demands a token and none was configured."""


@dataclass(frozen=True)
class SummaryResult:
    summary: YearSummary
    cached: bool = False
    stale: bool = False


def _classify_status_error(
    exc: httpx.HTTPStatusError, token: str | None
) -> GitHubAPIError:
    response = exc.response
    if response.status_code == 401 and not token:
        return GitHubTokenMissingError("GitHub token is not configured")
    if response.status_code == 429:
        return GitHubRateLimitError("GitHub API rate limit exceeded")
    if response.status_code == 403:
        if response.headers.get("x-ratelimit-remaining") == "0":
            return GitHubRateLimitError("GitHub API rate limit exceeded")
        return InvalidGitHubTokenError("GitHub token was rejected")
    if response.status_code == 401:
        return InvalidGitHubTokenError("GitHub token is invalid")
    return GitHubAPIError(f"GitHub API returned {response.status_code}")


def fetch_user_record(
    username: str, year: int, token: str | None, graphql_url: str
) -> GitHubUserRecord:
    """Fetch a user record, translating collaborator failures into error kinds."""

    try:
        return fetch_year_record(
            username=username,
            year=year,
            token=token,
            graphql_url=graphql_url,
        )
    except httpx.HTTPStatusError as exc:
        raise _classify_status_error(exc, token) from exc
    except GitHubUserMissingError as exc:
        raise GitHubUserNotFoundError("GitHub user not found") from exc
    except GitHubGraphQLError as exc:
        if exc.error_type == "NOT_FOUND":
            raise GitHubUserNotFoundError("GitHub user not found") from exc
        if exc.error_type == "RATE_LIMITED" or "rate limit" in str(exc).lower():
            raise GitHubRateLimitError("GitHub API rate limit exceeded") from exc
        raise GitHubAPIError(str(exc)) from exc
    except Exception as exc:
        raise GitHubAPIError("GitHub API request failed") from exc


def get_year_summary(
    username: str,
    year: int,
    token: str | None,
    settings: Settings,
    db: Session | None = None,
) -> SummaryResult:
    """Return the year summary for `username`, from cache when it is fresh."""

    now = datetime.now(UTC)
    cached = get_cached_summary(
        db,
        username,
        year,
        now=now,
        stale_after_hours=settings.cache_stale_after_hours,
    )
    if cached is not None and not cached.stale:
        return SummaryResult(summary=cached.summary, cached=True)

    try:
        record = fetch_user_record(
            username=username,
            year=year,
            token=token or settings.github_token,
            graphql_url=settings.github_graphql_url,
        )
    except GitHubAPIError:
        if cached is not None:
            logger.warning("Using stale cache for %s as fallback", username)
            return SummaryResult(summary=cached.summary, cached=True, stale=True)
        raise

    summary = build_year_summary(
        record,
        year=year,
        now=now,
        top_languages=settings.top_languages_count,
        top_repos=settings.top_repos_count,
        min_prior_total=settings.growth_min_prior_total,
    )
    set_cached_summary(
        db, username, year, summary, now=now, ttl_seconds=settings.cache_ttl_seconds
    )
    return SummaryResult(summary=summary)
