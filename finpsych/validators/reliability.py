"""
Data reliability and the FinPsych blend.

FinPsych = round1(cwi x w_cwi + nci x w_nci), where the weights shift toward
the NCI (the objective measure) as the self-reported data becomes less
reliable:

    HIGH           0.50 / 0.50
    MODERATE-HIGH  0.45 / 0.55
    MODERATE       0.35 / 0.65
    LOW            0.25 / 0.75
    VERY LOW       0.15 / 0.85

Base reliability comes from the gaming risk level; a consistency score
below 65 forces VERY LOW and below 75 forces LOW.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Union

from finpsych.schemas.enums import DataReliabilityLevel, GamingRiskLevel
from finpsych.scorers.normalization import round1

logger = logging.getLogger(__name__)

VERY_LOW_CONSISTENCY_BELOW = 65
LOW_CONSISTENCY_BELOW = 75


@dataclass(frozen=True)
class ReliabilityInfo:
    level: DataReliabilityLevel
    label: str


@dataclass(frozen=True)
class FinPsychWeights:
    cwi: float
    nci: float


@dataclass
class FinPsychResult:
    """Blended score with the reliability and weights that produced it."""

    score: float
    reliability: DataReliabilityLevel
    weights: FinPsychWeights

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "reliability": self.reliability.value,
            "weights": {"cwi": self.weights.cwi, "nci": self.weights.nci},
        }


RELIABILITY_INFO = MappingProxyType({
    level: ReliabilityInfo(level=level, label=level.label) for level in DataReliabilityLevel
})

FINPSYCH_WEIGHTS = MappingProxyType({
    DataReliabilityLevel.HIGH: FinPsychWeights(cwi=0.50, nci=0.50),
    DataReliabilityLevel.MODERATE_HIGH: FinPsychWeights(cwi=0.45, nci=0.55),
    DataReliabilityLevel.MODERATE: FinPsychWeights(cwi=0.35, nci=0.65),
    DataReliabilityLevel.LOW: FinPsychWeights(cwi=0.25, nci=0.75),
    DataReliabilityLevel.VERY_LOW: FinPsychWeights(cwi=0.15, nci=0.85),
})

GAMING_RISK_TO_RELIABILITY = MappingProxyType({
    GamingRiskLevel.MINIMAL: DataReliabilityLevel.HIGH,
    GamingRiskLevel.LOW: DataReliabilityLevel.MODERATE_HIGH,
    GamingRiskLevel.MODERATE: DataReliabilityLevel.MODERATE,
    GamingRiskLevel.HIGH: DataReliabilityLevel.LOW,
    GamingRiskLevel.SEVERE: DataReliabilityLevel.VERY_LOW,
})

# Badge labels stored by older records in place of the level
LEGACY_LABELS = MappingProxyType({
    "GOOD": GamingRiskLevel.MINIMAL,
    "EXCELLENT": GamingRiskLevel.MINIMAL,
    "FLAGGED": GamingRiskLevel.HIGH,
    "POOR": GamingRiskLevel.SEVERE,
})


def normalize_gaming_risk_level(level: Union[GamingRiskLevel, str, None]) -> Optional[GamingRiskLevel]:
    """Parse a stored level or legacy badge label; None if unrecognized."""
    if not level:
        return None
    upper = str(getattr(level, "value", level)).upper()
    if upper in GamingRiskLevel.__members__:
        return GamingRiskLevel(upper)
    return LEGACY_LABELS.get(upper)


def get_reliability_from_gaming_risk(level: Union[GamingRiskLevel, str, None]) -> Optional[ReliabilityInfo]:
    """Base reliability for a gaming risk level, without consistency adjustments."""
    normalized = normalize_gaming_risk_level(level)
    if normalized is None:
        return None
    return RELIABILITY_INFO[GAMING_RISK_TO_RELIABILITY[normalized]]


def get_finpsych_weights(reliability: DataReliabilityLevel) -> FinPsychWeights:
    return FINPSYCH_WEIGHTS[reliability]


def calculate_finpsych_score(
    cwi_score: Optional[float],
    nci_score: Optional[float],
    gaming_risk_level: Union[GamingRiskLevel, str, None],
    consistency_score: Optional[float],
) -> Optional[FinPsychResult]:
    """
    Blend CWI and NCI with reliability-dependent weights.

    Args:
        cwi_score: CWI on 0-100
        nci_score: NCI on 0-100
        gaming_risk_level: Stored level or legacy badge label; unknown or
            missing values are treated as MODERATE
        consistency_score: 0-100, or None when no validation was run

    Returns:
        FinPsychResult, or None if the CWI or NCI is missing
    """
    if cwi_score is None or nci_score is None:
        return None

    normalized = normalize_gaming_risk_level(gaming_risk_level)
    if normalized is None:
        if gaming_risk_level:
            logger.warning(f"Unknown gaming risk level {gaming_risk_level!r}, assuming MODERATE reliability")
        reliability = DataReliabilityLevel.MODERATE
    else:
        reliability = GAMING_RISK_TO_RELIABILITY[normalized]

    if consistency_score is not None:
        if consistency_score < VERY_LOW_CONSISTENCY_BELOW:
            reliability = DataReliabilityLevel.VERY_LOW
        elif consistency_score < LOW_CONSISTENCY_BELOW:
            reliability = DataReliabilityLevel.LOW

    weights = FINPSYCH_WEIGHTS[reliability]
    score = round1(cwi_score * weights.cwi + nci_score * weights.nci)

    return FinPsychResult(score=score, reliability=reliability, weights=weights)
