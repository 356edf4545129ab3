"""
CWI Scoring Engine - runs the full pipeline for one submission.

Execution order:
1. Score questions and aggregate into construct means
2. Standardize constructs (z-scores, advisory)
3. NCI side channel
4. Aggregate raw construct means into the 5Cs (0-100, None when empty)
5. CWI raw: weighted mean over categories with data
6. Country normalization and 0-100 rescale
7. Percentile and risk band

The z-scores are stored on the result but do not feed the 5Cs; they are
kept for the alternate PCA-weighted model (constructs.apply_pca_weights).

Usage:
    from finpsych.scorers.engine import calculate_cwi

    result = calculate_cwi(responses, "Nigeria")
    print(result.cwi_0_100, result.risk_band)
"""

import logging
from datetime import datetime, timezone
from typing import Mapping, Optional

from finpsych.config import DEFAULT_CONFIG, ScoringConfig
from finpsych.schemas.enums import RiskBand
from finpsych.schemas.results import ScoringResult
from finpsych.scorers.constructs import aggregate_constructs, standardize_constructs
from finpsych.scorers.five_cs import aggregate_five_cs, calculate_cwi_raw
from finpsych.scorers.nci import calculate_nci
from finpsych.scorers.normalization import (
    assign_risk_band,
    convert_to_0_100,
    normalize_by_country,
    round_half_up,
    z_score_to_percentile,
)

logger = logging.getLogger(__name__)


def calculate_cwi(
    responses: Mapping[str, str],
    country: Optional[str],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> ScoringResult:
    """Score one submission.

    Args:
        responses: question id -> answer string (not modified)
        country: Respondent country; unmapped values use the "Other" calibration
        config: Calibration set (defaults to the built-in tables)

    Returns:
        ScoringResult. When no 5Cs category has data, the CWI fields and the
        percentile are None and the risk band is UNKNOWN.

    Raises:
        LCAOverflowError: If the loan-consequence answers exceed their maximum
    """
    construct_scores = aggregate_constructs(responses, config)
    construct_z_scores = standardize_constructs(construct_scores, config)
    nci_score = calculate_nci(construct_scores)

    five_cs = aggregate_five_cs(construct_scores, config)
    cwi_raw = calculate_cwi_raw(five_cs, config)

    cwi_normalized = None
    cwi_0_100 = None
    risk_percentile = None
    risk_band = RiskBand.UNKNOWN

    if cwi_raw is not None:
        cwi_normalized = normalize_by_country(cwi_raw, country, config)
        cwi_0_100 = convert_to_0_100(cwi_normalized)
        percentile = z_score_to_percentile(cwi_normalized)
        risk_band = assign_risk_band(percentile, config)
        risk_percentile = round_half_up(percentile, 2)
    else:
        logger.debug(f"No 5Cs category has data ({len(responses)} responses); CWI left empty")

    return ScoringResult(
        construct_scores=construct_scores,
        construct_z_scores=construct_z_scores,
        five_c_scores=five_cs,
        cwi_raw=cwi_raw,
        cwi_normalized=cwi_normalized,
        cwi_0_100=cwi_0_100,
        risk_band=risk_band,
        risk_percentile=risk_percentile,
        nci_score=nci_score,
        model_version=config.model_version,
        country=country or "",
        scored_at=datetime.now(timezone.utc).isoformat(),
    )
