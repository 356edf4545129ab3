"""
Construct Aggregator and Standardizer.

Groups scored answers by construct and reduces each group to its mean, then
(advisory) re-expresses each mean as a z-score against the population table.

The z-score path and the PCA weights are a reserved alternate model: the
active CWI is computed from raw construct means (see five_cs.py).
"""

import json
import logging
from collections import defaultdict
from typing import Mapping

from finpsych import constants
from finpsych.config import DEFAULT_CONFIG, ScoringConfig
from finpsych.scorers.question_scorer import score_question

logger = logging.getLogger(__name__)

LCA_CONSTRUCT = "loan_consequence_awareness"
GAMING_CONSTRUCT = "gaming_detection"


class ScoringError(Exception):
    """Base error for submissions that cannot be scored."""

    pass


class LCAOverflowError(ScoringError):
    """Loan-consequence raw points exceed the questionnaire maximum.

    Signals duplicated or corrupted LCA answers upstream. The value is never clamped.
    """

    def __init__(self, raw_sum: float, maximum: int):
        self.raw_sum = raw_sum
        self.maximum = maximum
        super().__init__(f"LCA raw score {raw_sum:g} exceeds maximum {maximum}")


def _answer_text(answer) -> str:
    """Answers are strings; exported ranking answers may arrive already decoded."""
    if isinstance(answer, str):
        return answer
    return json.dumps(answer)


def _is_excluded(question_id: str, answer: str) -> bool:
    if question_id.startswith(constants.DEMOGRAPHIC_PREFIX):
        return True
    return answer.strip().startswith(constants.NOT_APPLICABLE_PREFIX)


def aggregate_constructs(
    responses: Mapping[str, str], config: ScoringConfig = DEFAULT_CONFIG
) -> dict[str, float]:
    """
    Score every answer and average per construct.

    Skipped: demographic ids, ids with no construct, gaming-detection items
    and answers starting with "N/A". A construct appears in the result only
    when at least one answer contributed to it.

    Raises:
        LCAOverflowError: If the loan-consequence raw sum exceeds the maximum
    """
    totals: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)

    for question_id, raw_answer in responses.items():
        if raw_answer is None:
            continue
        answer = _answer_text(raw_answer)
        if _is_excluded(question_id, answer):
            continue

        construct = config.construct_for(question_id)
        if construct is None or construct == GAMING_CONSTRUCT:
            continue

        totals[construct] += score_question(question_id, answer, config)
        counts[construct] += 1

    lca_raw = totals.get(LCA_CONSTRUCT, 0.0)
    if lca_raw > config.lca_max_raw_score:
        raise LCAOverflowError(lca_raw, config.lca_max_raw_score)

    return {construct: totals[construct] / counts[construct] for construct in totals}


def standardize_constructs(
    construct_scores: Mapping[str, float], config: ScoringConfig = DEFAULT_CONFIG
) -> dict[str, float]:
    """z = (raw - mean) / std per construct; unknown constructs use mean 3, std 1."""
    z_scores = {}
    for construct, raw in construct_scores.items():
        mean, std = config.population_stats(construct)
        z_scores[construct] = (raw - mean) / std
    return z_scores


def apply_pca_weights(
    construct_z_scores: Mapping[str, float], config: ScoringConfig = DEFAULT_CONFIG
) -> float:
    """PCA-weighted mean of the z-scores present, renormalized by the weight used.

    Returns 0.0 when no weighted construct is present.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for construct, weight in config.pca_weights.items():
        z_score = construct_z_scores.get(construct)
        if z_score is not None:
            weighted_sum += z_score * weight
            total_weight += weight
    return weighted_sum / total_weight if total_weight > 0 else 0.0
