from collections.abc import Iterable

from gitwrap.engine.models import RepositoryContribution
from gitwrap.engine.models import TopLanguage

NEUTRAL_LANGUAGE_COLOR = "#9ca3af"


def aggregate_languages(
    repositories: Iterable[RepositoryContribution], top_n: int = 3
) -> list[TopLanguage]:
    """Share of contributions per primary language, largest first.

    Repositories without a detected primary language are left out of every
    bucket, including the total the shares are computed against.
    """

    counts: dict[str, int] = {}
    colors: dict[str, str | None] = {}
    for repository in repositories:
        language = repository.language
        if language is None:
            continue
        counts[language.name] = counts.get(language.name, 0) + repository.contributions
        if language.color or language.name not in colors:
            colors[language.name] = language.color

    total = sum(counts.values())
    if total == 0:
        return []

    languages = [
        TopLanguage(
            name=name,
            percent=count / total,
            color=colors.get(name) or NEUTRAL_LANGUAGE_COLOR,
        )
        for name, count in counts.items()
    ]
    languages.sort(key=lambda language: language.percent, reverse=True)
    return languages[: max(top_n, 0)]
