from datetime import date
from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Path
from fastapi import Query
from fastapi import Response
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from gitwrap.api.schemas.stats import CardLayout
from gitwrap.api.schemas.stats import CardResponse
from gitwrap.api.schemas.stats import CardTheme
from gitwrap.api.schemas.stats import StatsResponse
from gitwrap.core.security import bearer_scheme
from gitwrap.core.security import extract_bearer_token
from gitwrap.db import get_db
from gitwrap.engine.heatmap import build_heatmap_weeks
from gitwrap.engine.models import HeatmapWeek
from gitwrap.services.cache_service import clear_cached_summary
from gitwrap.services.caption_service import generate_caption
from gitwrap.services.summary_service import GitHubAPIError
from gitwrap.services.summary_service import GitHubRateLimitError
from gitwrap.services.summary_service import GitHubUserNotFoundError
from gitwrap.services.summary_service import InvalidGitHubTokenError
from gitwrap.services.summary_service import SummaryResult
from gitwrap.services.summary_service import get_year_summary
from gitwrap.settings import Settings


router = APIRouter()

GITHUB_LOGIN_PATTERN = r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$"
FIRST_GITHUB_YEAR = 2008

Username = Annotated[str, Path(pattern=GITHUB_LOGIN_PATTERN)]
Year = Annotated[int | None, Query(ge=FIRST_GITHUB_YEAR)]


def get_settings() -> Settings:
    return Settings()


def resolve_year(year: int | None, settings: Settings) -> int:
    resolved = settings.wrapped_year if year is None else year
    if resolved > date.today().year:
        raise HTTPException(status_code=400, detail="year cannot be in the future")
    return resolved


def load_summary(
    username: str,
    year: int,
    credentials: HTTPAuthorizationCredentials | None,
    settings: Settings,
    db: Session | None,
) -> SummaryResult:
    token = extract_bearer_token(credentials)

    try:
        return get_year_summary(
            username=username,
            year=year,
            token=token,
            settings=settings,
            db=db,
        )
    except GitHubUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail="GitHub user not found") from exc
    except GitHubRateLimitError as exc:
        raise HTTPException(
            status_code=429,
            detail="GitHub API rate limit exceeded. Please try again later.",
        ) from exc
    except InvalidGitHubTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except GitHubAPIError as exc:
        raise HTTPException(
            status_code=502, detail="GitHub API request failed"
        ) from exc


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "gitwrap"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/api/stats/{username}", response_model=StatsResponse)
def get_stats(
    username: Username,
    year: Year = None,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Session | None = Depends(get_db),
) -> StatsResponse:
    """Return the year-in-review summary for a GitHub user."""

    result = load_summary(
        username, resolve_year(year, settings), credentials, settings, db
    )
    return StatsResponse(data=result.summary, cached=result.cached, stale=result.stale)


@router.get("/api/stats/{username}/heatmap", response_model=list[HeatmapWeek])
def get_heatmap(
    username: Username,
    year: Year = None,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Session | None = Depends(get_db),
) -> list[HeatmapWeek]:
    """Return the contribution calendar as week columns of intensity levels."""

    result = load_summary(
        username, resolve_year(year, settings), credentials, settings, db
    )
    return build_heatmap_weeks(result.summary.contribution_calendar)


@router.get("/api/stats/{username}/card", response_model=CardResponse)
def get_card(
    username: Username,
    year: Year = None,
    theme: CardTheme = CardTheme.SPACE,
    layout: CardLayout = CardLayout.CLASSIC,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Session | None = Depends(get_db),
) -> CardResponse:
    """Return summary, heatmap and caption for rendering one card."""

    result = load_summary(
        username, resolve_year(year, settings), credentials, settings, db
    )
    return CardResponse(
        summary=result.summary,
        heatmap=build_heatmap_weeks(result.summary.contribution_calendar),
        caption=generate_caption(result.summary, settings),
        theme=theme,
        layout=layout,
    )


@router.delete("/api/stats/{username}/cache", status_code=204)
def delete_cached_stats(
    username: Username,
    year: Year = None,
    settings: Settings = Depends(get_settings),
    db: Session | None = Depends(get_db),
) -> Response:
    """Drop the cached summary so the next request recomputes it."""

    clear_cached_summary(db, username, resolve_year(year, settings))
    return Response(status_code=204)
