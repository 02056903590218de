"""Service badges derived from component metadata."""

from __future__ import annotations

import math

from ..models import Badge, ComponentConfig, Lifecycle
from ..sanitize import sanitize_html

TEXT_COLOR = "#fff"
TYPE_COLOR = "#6366f1"
LABEL_COLOR = "#6b7280"
UNKNOWN_COLOR = "#6b7280"

LIFECYCLE_COLORS = {
    Lifecycle.ACTIVE: "#22c55e",
    Lifecycle.PRERELEASE: "#f59e0b",
    Lifecycle.DEPRECATED: "#ef4444",
}

TIER_COLORS = {
    1: "#1e40af",
    2: "#3b82f6",
    3: "#8b5cf6",
    4: "#a78bfa",
}

SCORE_GOOD = 80
SCORE_FAIR = 50


def scorecard_percentage(score: float, max_score: float) -> int:
    """Score as a whole percentage, rounding halves up; 0 when max_score is 0."""
    if not max_score:
        return 0
    return int(math.floor(score / max_score * 100 + 0.5))


def scorecard_color(percentage: int) -> str:
    if percentage >= SCORE_GOOD:
        return LIFECYCLE_COLORS[Lifecycle.ACTIVE]
    if percentage >= SCORE_FAIR:
        return LIFECYCLE_COLORS[Lifecycle.PRERELEASE]
    return LIFECYCLE_COLORS[Lifecycle.DEPRECATED]


def build_badges(config: ComponentConfig) -> list[Badge]:
    """Badges in display order: type, lifecycle, tier, labels, scorecards."""
    badges: list[Badge] = []

    if config.typeId:
        badges.append(Badge(content=config.typeId.value, backgroundColor=TYPE_COLOR, textColor=TEXT_COLOR))

    if config.lifecycle:
        badges.append(
            Badge(
                content=config.lifecycle.value,
                backgroundColor=LIFECYCLE_COLORS.get(config.lifecycle, UNKNOWN_COLOR),
                textColor=TEXT_COLOR,
            )
        )

    if config.tier:
        badges.append(
            Badge(
                content=f"Tier {config.tier}",
                backgroundColor=TIER_COLORS.get(config.tier, UNKNOWN_COLOR),
                textColor=TEXT_COLOR,
            )
        )

    for label in config.labels:
        badges.append(Badge(content=sanitize_html(label), backgroundColor=LABEL_COLOR, textColor=TEXT_COLOR))

    for scorecard in config.scorecards:
        percentage = scorecard_percentage(scorecard.score, scorecard.maxScore)
        badges.append(
            Badge(
                content=f"{sanitize_html(scorecard.name)}: {percentage}%",
                backgroundColor=scorecard_color(percentage),
                textColor=TEXT_COLOR,
            )
        )

    return badges
