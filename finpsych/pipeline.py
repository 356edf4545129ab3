"""
Submission scoring - the CWI pipeline and the consistency pipeline side by side.

Both pipelines read the same raw responses independently. The FinPsych blend
then combines their outputs: CWI and NCI weighted by how reliable the
self-reported answers look.

Usage:
    from finpsych.pipeline import score_submission

    scores = score_submission(responses, "Kenya")
    print(scores.scoring.cwi_0_100, scores.quality_badge.label)
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from finpsych.config import DEFAULT_CONFIG, ScoringConfig
from finpsych.schemas.enums import GamingRiskLevel
from finpsych.schemas.results import QualityBadge, ScoringResult, ValidationResult
from finpsych.scorers.engine import calculate_cwi
from finpsych.scorers.nci import NCIBreakdown, calculate_nci_breakdown
from finpsych.validators.consistency_validator import validate_responses
from finpsych.validators.quality_badge import QUALITY_BADGES, derive_gaming_risk_level
from finpsych.validators.reliability import FinPsychResult, calculate_finpsych_score

logger = logging.getLogger(__name__)


@dataclass
class SubmissionScore:
    """Everything derived from one submission."""

    scoring: ScoringResult
    validation: ValidationResult
    gaming_risk_level: GamingRiskLevel
    quality_badge: QualityBadge
    nci: Optional[NCIBreakdown] = None
    finpsych: Optional[FinPsychResult] = None

    def to_dict(self) -> dict:
        return {
            "scoring": self.scoring.model_dump(mode="json"),
            "validation": self.validation.model_dump(mode="json"),
            "gaming_risk_level": self.gaming_risk_level.value,
            "quality_badge": self.quality_badge.label,
            "nci": self.nci.to_dict() if self.nci else None,
            "finpsych": self.finpsych.to_dict() if self.finpsych else None,
        }


def score_submission(
    responses: Mapping[str, str],
    country: Optional[str],
    config: ScoringConfig = DEFAULT_CONFIG,
) -> SubmissionScore:
    """
    Score one submission end to end.

    Raises:
        LCAOverflowError: If the loan-consequence answers exceed their maximum
    """
    scoring = calculate_cwi(responses, country, config)
    validation = validate_responses(responses)
    gaming_risk_level = derive_gaming_risk_level(validation)

    nci = calculate_nci_breakdown(scoring.construct_scores)
    finpsych = calculate_finpsych_score(
        scoring.cwi_0_100,
        scoring.nci_score,
        gaming_risk_level,
        validation.consistency_score,
    )
    if finpsych is None:
        logger.debug("FinPsych score unavailable: CWI or NCI missing")

    return SubmissionScore(
        scoring=scoring,
        validation=validation,
        gaming_risk_level=gaming_risk_level,
        quality_badge=QUALITY_BADGES[gaming_risk_level],
        nci=nci,
        finpsych=finpsych,
    )
