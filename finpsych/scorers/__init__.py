"""Deterministic CWI scoring pipeline."""

from finpsych.scorers.constructs import (
    LCAOverflowError,
    ScoringError,
    aggregate_constructs,
    apply_pca_weights,
    standardize_constructs,
)
from finpsych.scorers.engine import calculate_cwi
from finpsych.scorers.five_cs import aggregate_five_cs, calculate_cwi_raw
from finpsych.scorers.nci import NCIBreakdown, calculate_nci, calculate_nci_breakdown
from finpsych.scorers.normalization import (
    assign_risk_band,
    convert_to_0_100,
    normalize_by_country,
    z_score_to_percentile,
)
from finpsych.scorers.question_scorer import classify_question, score_question

__all__ = [
    # Engine
    "calculate_cwi",
    # Question scoring
    "classify_question",
    "score_question",
    # Constructs
    "aggregate_constructs",
    "standardize_constructs",
    "apply_pca_weights",
    "ScoringError",
    "LCAOverflowError",
    # NCI
    "NCIBreakdown",
    "calculate_nci",
    "calculate_nci_breakdown",
    # 5Cs / CWI
    "aggregate_five_cs",
    "calculate_cwi_raw",
    "normalize_by_country",
    "convert_to_0_100",
    "z_score_to_percentile",
    "assign_risk_band",
]
