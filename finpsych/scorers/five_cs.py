"""
5Cs Aggregator and CWI Raw Calculator.

Categories average the raw construct means mapped to them (equal weight),
rescaled from the 1-5 Likert range to 0-100. A category with no contributing
construct is None, never a midpoint.
"""

from typing import Mapping, Optional

from finpsych import constants
from finpsych.config import DEFAULT_CONFIG, ScoringConfig
from finpsych.schemas.results import FiveCScores


def rescale_likert(value: float) -> float:
    """((x - 1) / 4) x 100, clamped to [0, 100]."""
    span = constants.LIKERT_MAX - constants.LIKERT_MIN
    scaled = (value - constants.LIKERT_MIN) / span * 100
    return max(0.0, min(100.0, scaled))


def aggregate_five_cs(
    construct_scores: Mapping[str, float], config: ScoringConfig = DEFAULT_CONFIG
) -> FiveCScores:
    categories: dict[str, Optional[float]] = {}
    for category in constants.FIVE_C_CATEGORIES:
        present = [
            construct_scores[construct]
            for construct in config.five_c_map.get(category, ())
            if construct in construct_scores
        ]
        categories[category] = rescale_likert(sum(present) / len(present)) if present else None
    return FiveCScores(**categories)


def calculate_cwi_raw(five_cs: FiveCScores, config: ScoringConfig = DEFAULT_CONFIG) -> Optional[float]:
    """Weighted mean of the categories with data, renormalized by the weight actually used."""
    weighted_sum = 0.0
    total_weight = 0.0
    for category, score in five_cs.present().items():
        weight = config.five_c_weights.get(category, 0.0)
        weighted_sum += score * weight
        total_weight += weight
    if total_weight <= 0:
        return None
    return weighted_sum / total_weight
