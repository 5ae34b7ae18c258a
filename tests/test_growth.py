from gitwrap.engine.growth import compare_growth
from gitwrap.engine.growth import growth_percent
from gitwrap.engine.models import YearOverYearGrowth
from gitwrap.engine.models import YearTotals


def test_growth_absent_when_prior_year_is_empty() -> None:
    current = YearTotals(commits=50, prs=10, issues=5)
    prior = YearTotals()

    assert compare_growth(current, prior) is None


def test_growth_absent_below_minimum_prior_volume() -> None:
    current = YearTotals(commits=50)
    prior = YearTotals(commits=5, prs=2, issues=2, pr_reviews=100)

    assert compare_growth(current, prior) is None


def test_growth_present_at_minimum_prior_volume() -> None:
    growth = compare_growth(YearTotals(commits=20), YearTotals(commits=10))

    assert growth == YearOverYearGrowth(
        commits_growth=100, prs_growth=0, issues_growth=0, overall_growth=100
    )


def test_growth_per_metric_percentages() -> None:
    current = YearTotals(commits=150, prs=5, issues=0)
    prior = YearTotals(commits=100, prs=10, issues=4)

    growth = compare_growth(current, prior)

    assert growth is not None
    assert growth.commits_growth == 50
    assert growth.prs_growth == -50
    assert growth.issues_growth == -100
    # 155 vs 114
    assert growth.overall_growth == 36


def test_growth_metric_new_this_year_is_plus_one_hundred() -> None:
    growth = compare_growth(YearTotals(commits=30, prs=7), YearTotals(commits=30))

    assert growth is not None
    assert growth.prs_growth == 100
    assert growth.issues_growth == 0
    assert growth.commits_growth == 0


def test_growth_minimum_threshold_is_configurable() -> None:
    assert compare_growth(YearTotals(commits=4), YearTotals(commits=2), 2) is not None
    assert compare_growth(YearTotals(commits=40), YearTotals(commits=20), 50) is None


def test_growth_percent_rounds_half_up() -> None:
    assert growth_percent(3, 2) == 50
    assert growth_percent(1, 8) == -87
    assert growth_percent(201, 200) == 1
    assert growth_percent(0, 0) == 0
    assert growth_percent(5, 0) == 100
