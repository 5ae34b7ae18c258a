from collections.abc import Iterable

from gitwrap.engine.models import RepositoryContribution
from gitwrap.engine.models import TopRepo


def rank_repositories(
    repositories: Iterable[RepositoryContribution], top_n: int = 5
) -> list[TopRepo]:
    """Repositories with contributions, most contributed first.

    The sort is stable, so ties keep the order the data source returned.
    """

    ranked = sorted(
        (repository for repository in repositories if repository.contributions > 0),
        key=lambda repository: repository.contributions,
        reverse=True,
    )
    return [
        TopRepo(
            name=repository.name,
            url=repository.url,
            contributions=repository.contributions,
            stargazers=repository.stargazers,
        )
        for repository in ranked[: max(top_n, 0)]
    ]
