"""
Gaming-risk classification and quality badges.

Flag count -> GamingRiskLevel -> badge:
- 0 flags: MINIMAL -> EXCELLENT (green)
- 1-2: LOW -> GOOD (emerald)
- 3-5: MODERATE -> MODERATE (yellow)
- 6-8: HIGH -> FLAGGED (orange)
- 9+: SEVERE -> POOR (red)
"""

import math
from types import MappingProxyType
from typing import Optional, Union

from finpsych.schemas.enums import GamingRiskLevel
from finpsych.schemas.results import QualityBadge, ValidationResult
from finpsych.validators.consistency_validator import FLAG_PENALTY

QUALITY_BADGES = MappingProxyType({
    GamingRiskLevel.MINIMAL: QualityBadge(
        level=GamingRiskLevel.MINIMAL,
        label="EXCELLENT",
        bg_color="bg-green-100",
        text_color="text-green-700",
        bg_color_hex="#dcfce7",
        text_color_hex="#15803d",
    ),
    GamingRiskLevel.LOW: QualityBadge(
        level=GamingRiskLevel.LOW,
        label="GOOD",
        bg_color="bg-emerald-100",
        text_color="text-emerald-700",
        bg_color_hex="#d1fae5",
        text_color_hex="#047857",
    ),
    GamingRiskLevel.MODERATE: QualityBadge(
        level=GamingRiskLevel.MODERATE,
        label="MODERATE",
        bg_color="bg-yellow-100",
        text_color="text-yellow-700",
        bg_color_hex="#fef9c3",
        text_color_hex="#a16207",
    ),
    GamingRiskLevel.HIGH: QualityBadge(
        level=GamingRiskLevel.HIGH,
        label="FLAGGED",
        bg_color="bg-orange-100",
        text_color="text-orange-700",
        bg_color_hex="#ffedd5",
        text_color_hex="#c2410c",
    ),
    GamingRiskLevel.SEVERE: QualityBadge(
        level=GamingRiskLevel.SEVERE,
        label="POOR",
        bg_color="bg-red-100",
        text_color="text-red-700",
        bg_color_hex="#fee2e2",
        text_color_hex="#b91c1c",
    ),
})


def gaming_risk_level_for_count(count: int) -> GamingRiskLevel:
    if count <= 0:
        return GamingRiskLevel.MINIMAL
    if count <= 2:
        return GamingRiskLevel.LOW
    if count <= 5:
        return GamingRiskLevel.MODERATE
    if count <= 8:
        return GamingRiskLevel.HIGH
    return GamingRiskLevel.SEVERE


def derive_gaming_risk_level(result: ValidationResult) -> GamingRiskLevel:
    return gaming_risk_level_for_count(result.inconsistencies_detected)


def get_quality_badge_from_risk_level(level: Union[GamingRiskLevel, str, None]) -> Optional[QualityBadge]:
    """Badge for a stored gaming risk level (case-insensitive); None if unknown."""
    if not level:
        return None
    try:
        return QUALITY_BADGES[GamingRiskLevel(str(getattr(level, "value", level)).upper())]
    except ValueError:
        return None


def get_quality_badge_from_validation(result: Optional[ValidationResult]) -> Optional[QualityBadge]:
    if result is None:
        return None
    return QUALITY_BADGES[derive_gaming_risk_level(result)]


def get_quality_badge(quality_score: Optional[float]) -> Optional[QualityBadge]:
    """Legacy badge from a bare consistency score, for records without flags.

    The score is inverted to the smallest flag count that produces it
    (score = 100 - 7 x flags), so every score on that grid gets the same badge
    as the flag count itself.
    """
    if quality_score is None:
        return None
    implied_flags = math.ceil((100 - quality_score) / FLAG_PENALTY)
    return QUALITY_BADGES[gaming_risk_level_for_count(implied_flags)]
