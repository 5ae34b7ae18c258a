from enum import StrEnum

from pydantic import BaseModel

from gitwrap.engine.models import HeatmapWeek
from gitwrap.engine.models import YearSummary


class CardTheme(StrEnum):
    """Colour themes the card renderer knows about."""

    SPACE = "space"
    SUNSET = "sunset"
    RETRO = "retro"
    MINIMAL = "minimal"
    HIGH_CONTRAST = "high-contrast"


class CardLayout(StrEnum):
    CLASSIC = "classic"
    MODERN = "modern"
    COMPACT = "compact"


class StatsResponse(BaseModel):
    """Year summary payload, flagged when it was served from the cache."""

    data: YearSummary
    cached: bool = False
    stale: bool = False


class CardResponse(BaseModel):
    """Everything a renderer needs to draw one card."""

    summary: YearSummary
    heatmap: list[HeatmapWeek]
    caption: str
    theme: CardTheme
    layout: CardLayout
