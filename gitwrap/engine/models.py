from datetime import date
from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Immutable record serialised with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class ContributionDay(EngineModel):
    """Total contribution volume for one calendar day."""

    date: date
    count: int = Field(ge=0)


class ContributionWeek(EngineModel):
    contribution_days: list[ContributionDay] = Field(default_factory=list)


class Language(EngineModel):
    name: str
    color: str | None = None


class RepositoryContribution(EngineModel):
    """Commit contributions attributed to one repository."""

    name: str
    url: str
    stargazers: int = Field(default=0, ge=0)
    language: Language | None = None
    contributions: int = Field(default=0, ge=0)


class OwnedRepository(EngineModel):
    name: str
    url: str
    stargazers: int = Field(default=0, ge=0)
    language: Language | None = None


class YearTotals(EngineModel):
    commits: int = Field(default=0, ge=0)
    issues: int = Field(default=0, ge=0)
    prs: int = Field(default=0, ge=0)
    pr_reviews: int = Field(default=0, ge=0)

    @property
    def volume(self) -> int:
        """Commits, issues and pull requests combined; reviews are not counted."""

        return self.commits + self.issues + self.prs


class ContributionYear(EngineModel):
    totals: YearTotals = Field(default_factory=YearTotals)
    weeks: list[ContributionWeek] = Field(default_factory=list)
    repositories: list[RepositoryContribution] = Field(default_factory=list)


class GitHubUserRecord(EngineModel):
    """Everything the engine needs about one user, as fetched from GitHub."""

    login: str
    name: str | None = None
    avatar_url: str = ""
    created_at: datetime
    current_year: ContributionYear = Field(default_factory=ContributionYear)
    prior_year: ContributionYear = Field(default_factory=ContributionYear)
    owned_repositories: list[OwnedRepository] = Field(default_factory=list)


class TopLanguage(EngineModel):
    name: str
    percent: float = Field(ge=0, le=1)
    color: str | None = None


class TopRepo(EngineModel):
    name: str
    url: str
    contributions: int = Field(gt=0)
    stargazers: int = Field(ge=0)


class YearOverYearGrowth(EngineModel):
    commits_growth: int
    prs_growth: int
    issues_growth: int
    overall_growth: int


class HeatmapWeek(EngineModel):
    """One heatmap column: seven intensity levels, Sunday first."""

    month_label: str = ""
    days: list[int] = Field(min_length=7, max_length=7)


class YearSummary(EngineModel):
    login: str
    name: str | None = None
    avatar_url: str = ""
    year: int
    total_contributions: int = 0
    total_commits: int = 0
    total_prs: int = Field(default=0, alias="totalPRs")
    total_issues: int = 0
    total_pr_reviews: int = Field(default=0, alias="totalPRReviews")
    total_stars_given: int = 0
    total_repositories: int = 0
    top_languages: list[TopLanguage] = Field(default_factory=list)
    top_repos: list[TopRepo] = Field(default_factory=list)
    longest_streak_days: int = 0
    best_day_of_week: str
    best_hour: int = Field(ge=0, le=23)
    contribution_calendar: list[ContributionDay] = Field(default_factory=list)
    github_anniversary: int = 0
    year_over_year_growth: YearOverYearGrowth | None = None
