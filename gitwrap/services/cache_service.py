"""Best-effort persistence of computed year summaries.

Every failure here is logged and reported as a cache miss; the caller
recomputes instead.
"""

import logging
from dataclasses import dataclass
from datetime import UTC
from datetime import datetime
from datetime import timedelta

from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gitwrap.engine.models import YearSummary
from gitwrap.models import StatsCacheEntry

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "gitwrap-stats-"


@dataclass(frozen=True)
class CachedSummary:
    summary: YearSummary
    generated_at: datetime
    stale: bool


def cache_key(username: str, year: int) -> str:
    return f"{CACHE_KEY_PREFIX}{username.lower()}-{year}"


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def get_cached_summary(
    db: Session | None,
    username: str,
    year: int,
    now: datetime,
    stale_after_hours: int = 24,
) -> CachedSummary | None:
    if db is None:
        return None

    try:
        entry = db.scalar(
            select(StatsCacheEntry).where(
                StatsCacheEntry.cache_key == cache_key(username, year)
            )
        )
    except SQLAlchemyError:
        logger.warning("Error reading cached stats for %s", username, exc_info=True)
        db.rollback()
        return None

    if entry is None or _as_utc(entry.expires_at) <= now:
        return None

    try:
        summary = YearSummary.model_validate(entry.payload)
    except ValidationError:
        logger.warning("Discarding undecodable cached stats for %s", username)
        return None

    generated_at = _as_utc(entry.generated_at)
    stale = now - generated_at > timedelta(hours=stale_after_hours)
    return CachedSummary(summary=summary, generated_at=generated_at, stale=stale)


def set_cached_summary(
    db: Session | None,
    username: str,
    year: int,
    summary: YearSummary,
    now: datetime,
    ttl_seconds: int = 15 * 60,
) -> None:
    if db is None:
        return

    key = cache_key(username, year)
    payload = summary.model_dump(mode="json", by_alias=True)
    expires_at = now + timedelta(seconds=ttl_seconds)

    try:
        entry = db.scalar(select(StatsCacheEntry).where(StatsCacheEntry.cache_key == key))
        if entry is None:
            db.add(
                StatsCacheEntry(
                    cache_key=key,
                    payload=payload,
                    generated_at=now,
                    expires_at=expires_at,
                )
            )
        else:
            entry.payload = payload
            entry.generated_at = now
            entry.expires_at = expires_at
        db.commit()
    except SQLAlchemyError:
        logger.warning("Error writing cached stats for %s", username, exc_info=True)
        db.rollback()
        return

    logger.info("Cached stats for %s (%ss TTL)", username, ttl_seconds)


def clear_cached_summary(db: Session | None, username: str, year: int) -> None:
    if db is None:
        return

    try:
        db.execute(
            delete(StatsCacheEntry).where(
                StatsCacheEntry.cache_key == cache_key(username, year)
            )
        )
        db.commit()
    except SQLAlchemyError:
        logger.warning("Error clearing cached stats for %s", username, exc_info=True)
        db.rollback()
        return

    logger.info("Cleared cache for %s", username)
