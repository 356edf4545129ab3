"""Result schemas and enums for the scoring engine."""

from finpsych.schemas.enums import (
    DataReliabilityLevel,
    FlagSeverity,
    GamingRiskLevel,
    QuestionKind,
    Recommendation,
    RiskBand,
    SeverityLevel,
)
from finpsych.schemas.results import (
    ConsistencyFlag,
    FiveCScores,
    QualityBadge,
    ScoringResult,
    ValidationResult,
)

__all__ = [
    # Enums
    "DataReliabilityLevel",
    "FlagSeverity",
    "GamingRiskLevel",
    "QuestionKind",
    "Recommendation",
    "RiskBand",
    "SeverityLevel",
    # Records
    "ConsistencyFlag",
    "FiveCScores",
    "QualityBadge",
    "ScoringResult",
    "ValidationResult",
]
