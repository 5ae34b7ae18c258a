from collections.abc import Generator
from datetime import UTC
from datetime import date
from datetime import datetime

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gitwrap.api.routes.stats import get_settings
from gitwrap.core.security import extract_bearer_token
from gitwrap.db import Base
from gitwrap.db import get_db
from gitwrap.engine.models import ContributionDay
from gitwrap.engine.models import ContributionWeek
from gitwrap.engine.models import ContributionYear
from gitwrap.engine.models import GitHubUserRecord
from gitwrap.engine.models import Language
from gitwrap.engine.models import RepositoryContribution
from gitwrap.engine.models import YearTotals
from gitwrap.main import app
from gitwrap.main import create_app
from gitwrap.services.summary_service import GitHubRateLimitError
from gitwrap.services.summary_service import GitHubTokenMissingError
from gitwrap.services.summary_service import GitHubUserNotFoundError
from gitwrap.settings import Settings


client = TestClient(app)


def make_record(username: str = "octocat") -> GitHubUserRecord:
    return GitHubUserRecord(
        login=username,
        name="The Octocat",
        avatar_url="https://avatars.githubusercontent.com/u/583231",
        created_at=datetime(2011, 1, 25, tzinfo=UTC),
        current_year=ContributionYear(
            totals=YearTotals(commits=50, prs=10, issues=5, pr_reviews=2),
            weeks=[
                ContributionWeek(
                    contribution_days=[
                        ContributionDay(date=date(2025, 1, 1), count=3),
                        ContributionDay(date=date(2025, 1, 2), count=0),
                        ContributionDay(date=date(2025, 1, 3), count=7),
                    ]
                )
            ],
            repositories=[
                RepositoryContribution(
                    name="repoA",
                    url="https://github.com/octocat/repoA",
                    stargazers=4,
                    language=Language(name="TypeScript", color="#3178c6"),
                    contributions=80,
                ),
                RepositoryContribution(
                    name="repoB",
                    url="https://github.com/octocat/repoB",
                    language=Language(name="Python", color="#3572A5"),
                    contributions=20,
                ),
            ],
        ),
    )


@pytest.fixture
def fetch_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []

    def fake_fetch_year_record(
        username: str, year: int, token: str | None, graphql_url: str
    ) -> GitHubUserRecord:
        calls.append({"username": username, "year": year, "token": token})
        return make_record(username)

    monkeypatch.setattr(
        "gitwrap.services.summary_service.fetch_year_record", fake_fetch_year_record
    )
    return calls


@pytest.fixture
def api_client() -> Generator[TestClient, None, None]:
    test_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(
        bind=test_engine,
        autoflush=False,
        autocommit=False,
    )

    Base.metadata.create_all(bind=test_engine)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    def override_get_settings() -> Settings:
        return Settings(github_token="app-token", gemini_api_key=None)

    application = create_app()
    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_settings] = override_get_settings

    with TestClient(application) as test_client:
        yield test_client

    application.dependency_overrides.clear()


def test_read_root_returns_greeting() -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "gitwrap"}


def test_health_live_returns_ok() -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_settings_reads_database_url_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://u:p@localhost:5432/db")

    settings = Settings()

    assert settings.database_url == "postgresql+psycopg://u:p@localhost:5432/db"


def test_get_stats_returns_summary(api_client: TestClient, fetch_calls) -> None:
    response = api_client.get("/api/stats/octocat?year=2025")

    assert response.status_code == 200
    body = response.json()
    assert body["cached"] is False
    assert body["stale"] is False
    data = body["data"]
    assert data["login"] == "octocat"
    assert data["totalCommits"] == 50
    assert data["totalPRs"] == 10
    assert data["longestStreakDays"] == 1
    assert data["bestDayOfWeek"] == "Friday"
    assert data["topLanguages"][0]["name"] == "TypeScript"
    assert data["topLanguages"][0]["percent"] == pytest.approx(0.8)
    assert [repo["name"] for repo in data["topRepos"]] == ["repoA", "repoB"]
    assert data["yearOverYearGrowth"] is None
    assert len(data["contributionCalendar"]) == 365
    assert fetch_calls == [{"username": "octocat", "year": 2025, "token": "app-token"}]


def test_get_stats_serves_second_request_from_cache(
    api_client: TestClient, fetch_calls
) -> None:
    first = api_client.get("/api/stats/octocat?year=2025")
    second = api_client.get("/api/stats/OctoCat?year=2025")

    assert first.json()["cached"] is False
    assert second.json()["cached"] is True
    assert second.json()["data"] == first.json()["data"]
    assert len(fetch_calls) == 1


def test_delete_cache_forces_recompute(api_client: TestClient, fetch_calls) -> None:
    api_client.get("/api/stats/octocat?year=2025")

    delete_response = api_client.delete("/api/stats/octocat/cache?year=2025")
    response = api_client.get("/api/stats/octocat?year=2025")

    assert delete_response.status_code == 204
    assert response.json()["cached"] is False
    assert len(fetch_calls) == 2


def test_get_stats_uses_caller_token(api_client: TestClient, fetch_calls) -> None:
    api_client.get(
        "/api/stats/octocat?year=2025",
        headers={"Authorization": "Bearer user-token"},
    )

    assert fetch_calls[0]["token"] == "user-token"


def test_get_stats_ignores_non_bearer_authorization(
    api_client: TestClient, fetch_calls
) -> None:
    response = api_client.get(
        "/api/stats/octocat?year=2025", headers={"Authorization": "Basic abc"}
    )

    assert response.status_code == 200
    assert fetch_calls[0]["token"] == "app-token"


@pytest.mark.parametrize("header", ["Bearer ", "Bearer", "bearer    "])
def test_get_stats_rejects_empty_bearer_token(
    api_client: TestClient, fetch_calls, header: str
) -> None:
    response = api_client.get(
        "/api/stats/octocat?year=2025", headers={"Authorization": header}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Authorization header must be a Bearer token"}
    assert fetch_calls == []


def test_extract_bearer_token_rejects_malformed_credentials() -> None:
    with pytest.raises(HTTPException) as exc_info:
        extract_bearer_token(
            HTTPAuthorizationCredentials(scheme="Bearer", credentials="   ")
        )

    assert exc_info.value.status_code == 401
    assert extract_bearer_token(None) is None
    assert (
        extract_bearer_token(
            HTTPAuthorizationCredentials(scheme="bearer", credentials=" tok ")
        )
        == "tok"
    )


def test_get_stats_defaults_to_configured_year(
    api_client: TestClient, fetch_calls
) -> None:
    response = api_client.get("/api/stats/octocat")

    assert response.status_code == 200
    assert response.json()["data"]["year"] == 2025


def test_get_stats_rejects_future_year(api_client: TestClient, fetch_calls) -> None:
    response = api_client.get(f"/api/stats/octocat?year={date.today().year + 1}")

    assert response.status_code == 400
    assert response.json() == {"detail": "year cannot be in the future"}


def test_get_stats_rejects_year_before_github(api_client: TestClient) -> None:
    response = api_client.get("/api/stats/octocat?year=2001")

    assert response.status_code == 422


def test_get_stats_rejects_invalid_username(api_client: TestClient) -> None:
    response = api_client.get("/api/stats/not_a_login!")

    assert response.status_code == 422


def test_get_stats_returns_404_for_unknown_user(
    monkeypatch: pytest.MonkeyPatch, api_client: TestClient
) -> None:
    def missing_user(**kwargs) -> GitHubUserRecord:
        raise GitHubUserNotFoundError("GitHub user not found")

    monkeypatch.setattr("gitwrap.services.summary_service.fetch_user_record", missing_user)

    response = api_client.get("/api/stats/ghost?year=2025")

    assert response.status_code == 404
    assert response.json() == {"detail": "GitHub user not found"}


def test_get_stats_returns_429_when_github_rate_limits(
    monkeypatch: pytest.MonkeyPatch, api_client: TestClient
) -> None:
    def rate_limited(**kwargs) -> GitHubUserRecord:
        raise GitHubRateLimitError("GitHub API rate limit exceeded")

    monkeypatch.setattr("gitwrap.services.summary_service.fetch_user_record", rate_limited)

    response = api_client.get("/api/stats/octocat?year=2025")

    assert response.status_code == 429


def test_get_stats_reports_missing_github_token(
    monkeypatch: pytest.MonkeyPatch, api_client: TestClient
) -> None:
    def no_token(**kwargs) -> GitHubUserRecord:
        raise GitHubTokenMissingError("GitHub token is not configured")

    monkeypatch.setattr("gitwrap.services.summary_service.fetch_user_record", no_token)

    response = api_client.get("/api/stats/octocat?year=2025")

    assert response.status_code == 401
    assert response.json() == {"detail": "GitHub token is not configured"}


def test_get_stats_returns_502_when_github_fails(
    monkeypatch: pytest.MonkeyPatch, api_client: TestClient
) -> None:
    def failing_fetch(**kwargs) -> GitHubUserRecord:
        raise RuntimeError("connection reset")

    monkeypatch.setattr(
        "gitwrap.services.summary_service.fetch_year_record", failing_fetch
    )

    response = api_client.get("/api/stats/octocat?year=2025")

    assert response.status_code == 502
    assert response.json() == {"detail": "GitHub API request failed"}


def test_get_heatmap_returns_week_columns(api_client: TestClient, fetch_calls) -> None:
    response = api_client.get("/api/stats/octocat/heatmap?year=2025")

    assert response.status_code == 200
    weeks = response.json()
    assert len(weeks) == 53
    assert weeks[0] == {"monthLabel": "Jan", "days": [0, 0, 0, 2, 0, 3, 0]}
    assert all(len(week["days"]) == 7 for week in weeks)


def test_get_card_returns_everything_for_rendering(
    api_client: TestClient, fetch_calls
) -> None:
    response = api_client.get(
        "/api/stats/octocat/card?year=2025&theme=retro&layout=compact"
    )

    assert response.status_code == 200
    body = response.json()
    assert body["theme"] == "retro"
    assert body["layout"] == "compact"
    assert body["summary"]["login"] == "octocat"
    assert len(body["heatmap"]) == 53
    assert body["caption"].startswith("octocat")


def test_get_card_rejects_unknown_theme(api_client: TestClient, fetch_calls) -> None:
    response = api_client.get("/api/stats/octocat/card?theme=neon")

    assert response.status_code == 422
