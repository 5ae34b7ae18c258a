import logging
import re

from pydantic import BaseModel

from gitwrap.clients.caption_client import generate_text
from gitwrap.engine.models import YearSummary
from gitwrap.settings import Settings

logger = logging.getLogger(__name__)

_SENTENCE_BREAK = re.compile(r"[.!?]\s+")


class CaptionFacts(BaseModel):
    """The part of a year summary a caption may mention."""

    login: str
    year: int
    total_contributions: int
    total_commits: int
    total_prs: int
    total_pr_reviews: int
    top_language: str | None
    longest_streak_days: int
    best_day_of_week: str
    best_hour: int


def caption_facts(summary: YearSummary) -> CaptionFacts:
    return CaptionFacts(
        login=summary.login,
        year=summary.year,
        total_contributions=summary.total_contributions,
        total_commits=summary.total_commits,
        total_prs=summary.total_prs,
        total_pr_reviews=summary.total_pr_reviews,
        top_language=summary.top_languages[0].name if summary.top_languages else None,
        longest_streak_days=summary.longest_streak_days,
        best_day_of_week=summary.best_day_of_week,
        best_hour=summary.best_hour,
    )


def one_sentence(text: str) -> str:
    """Keep the first sentence and make sure it ends with punctuation."""

    first = _SENTENCE_BREAK.split(text.strip(), maxsplit=1)[0].strip()
    if first.endswith((".", "!", "?")):
        return first
    return f"{first}."


def _login_hash(login: str) -> int:
    value = 7
    for char in login:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    return value


def template_caption(facts: CaptionFacts) -> str:
    """Deterministic caption, the same for the same login and totals."""

    login = facts.login
    total = facts.total_contributions
    templates = (
        f"{login}: {total} contributions, committing like it's cardio!",
        f"{login} made {total} contributions in {facts.year}; that keyboard must be legendary.",
        f"{login} clocked {total} contributions. Who needs sleep anyway?",
        f"{login} hit {total} contributions, coding and chaos in perfect harmony.",
    )
    return one_sentence(templates[_login_hash(login) % len(templates)])


def build_prompt(facts: CaptionFacts) -> str:
    return (
        "Generate one funny single-sentence GitHub summary with no line breaks.\n"
        "Tone: light, simple, playful. Mention at most two stats.\n"
        'Address the user as "User". Limit to 25 words.\n\n'
        f"Username: {facts.login}\n"
        f"Contributions: {facts.total_contributions}\n"
        f"Commits: {facts.total_commits}\n"
        f"PRs: {facts.total_prs}\n"
        f"Reviews: {facts.total_pr_reviews}\n"
        f"Top language: {facts.top_language or 'unknown'}\n"
        f"Streak: {facts.longest_streak_days} days\n"
        f"Best day: {facts.best_day_of_week}\n"
        f"Best hour: {facts.best_hour}:00\n"
    )


def generate_caption(summary: YearSummary, settings: Settings) -> str:
    """One-sentence caption from the text service, or the local template."""

    facts = caption_facts(summary)
    if not settings.gemini_api_key:
        logger.debug("No Gemini API key configured, using template caption")
        return template_caption(facts)

    try:
        text = generate_text(
            build_prompt(facts),
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            api_url=settings.gemini_api_url,
            timeout=settings.caption_timeout_seconds,
        )
    except Exception:
        logger.warning("Caption generation failed for %s", facts.login, exc_info=True)
        return template_caption(facts)

    if not text:
        return template_caption(facts)
    return one_sentence(text)
