"""FinPsych scoring engine: creditworthiness index, 5Cs, NCI and consistency checks."""

from finpsych.config import DEFAULT_CONFIG, ScoringConfig, load_config
from finpsych.constants import MODEL_VERSION
from finpsych.pipeline import SubmissionScore, score_submission
from finpsych.scorers import LCAOverflowError, ScoringError, calculate_cwi, calculate_nci
from finpsych.validators import (
    calculate_finpsych_score,
    derive_gaming_risk_level,
    format_validation_report,
    get_quality_badge_from_validation,
    validate_responses,
)

__all__ = [
    "MODEL_VERSION",
    # Configuration
    "DEFAULT_CONFIG",
    "ScoringConfig",
    "load_config",
    # Scoring
    "calculate_cwi",
    "calculate_nci",
    "ScoringError",
    "LCAOverflowError",
    # Validation
    "validate_responses",
    "format_validation_report",
    "derive_gaming_risk_level",
    "get_quality_badge_from_validation",
    "calculate_finpsych_score",
    # End to end
    "SubmissionScore",
    "score_submission",
]
