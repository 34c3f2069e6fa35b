"""Map 1-10 critique scores onto display tiers."""

from enum import Enum
from typing import NamedTuple


class ScoreTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class TierStyle(NamedTuple):
    tier: ScoreTier
    background: str
    border: str


# rich style names used by the CLI renderer
TIER_COLORS = {
    ScoreTier.EXCELLENT: "green",
    ScoreTier.GOOD: "yellow",
    ScoreTier.FAIR: "dark_orange",
    ScoreTier.POOR: "red",
}

TIER_BACKGROUNDS = {
    ScoreTier.EXCELLENT: TierStyle(ScoreTier.EXCELLENT, "on dark_green", "green"),
    ScoreTier.GOOD: TierStyle(ScoreTier.GOOD, "on grey23", "yellow"),
    ScoreTier.FAIR: TierStyle(ScoreTier.FAIR, "on grey19", "dark_orange"),
    ScoreTier.POOR: TierStyle(ScoreTier.POOR, "on dark_red", "red"),
}


def _tier(score: float) -> ScoreTier:
    if score >= 8:
        return ScoreTier.EXCELLENT
    if score >= 6:
        return ScoreTier.GOOD
    if score >= 4:
        return ScoreTier.FAIR
    return ScoreTier.POOR


def color_tier(score: float) -> ScoreTier:
    """Tier used for score text colour."""
    return _tier(score)


def background_tier(score: float) -> TierStyle:
    """Background/border pairing for panels; same thresholds as color_tier."""
    return TIER_BACKGROUNDS[_tier(score)]


def width_percent(score: float) -> int:
    """Width of a proportional score bar, clamped to 0-100."""
    return int(max(0, min(100, score * 10)))


def score_style(score: float) -> str:
    return TIER_COLORS[color_tier(score)]
