"""
Validators for questionnaire responses.

This module provides:
- Cross-question consistency checks (16 checks)
- Gaming-risk classification and quality badges
- Data reliability and the FinPsych blend
"""

from .consistency_validator import (
    CONSISTENCY_CHECKS,
    format_validation_report,
    validate_responses,
)
from .quality_badge import (
    QUALITY_BADGES,
    derive_gaming_risk_level,
    gaming_risk_level_for_count,
    get_quality_badge,
    get_quality_badge_from_risk_level,
    get_quality_badge_from_validation,
)
from .reliability import (
    FINPSYCH_WEIGHTS,
    RELIABILITY_INFO,
    FinPsychResult,
    FinPsychWeights,
    ReliabilityInfo,
    calculate_finpsych_score,
    get_finpsych_weights,
    get_reliability_from_gaming_risk,
)

__all__ = [
    # Consistency checks
    "CONSISTENCY_CHECKS",
    "validate_responses",
    "format_validation_report",
    # Quality badges
    "QUALITY_BADGES",
    "gaming_risk_level_for_count",
    "derive_gaming_risk_level",
    "get_quality_badge_from_risk_level",
    "get_quality_badge_from_validation",
    "get_quality_badge",
    # Reliability
    "RELIABILITY_INFO",
    "FINPSYCH_WEIGHTS",
    "ReliabilityInfo",
    "FinPsychWeights",
    "FinPsychResult",
    "get_reliability_from_gaming_risk",
    "get_finpsych_weights",
    "calculate_finpsych_score",
]
