"""
Neurocognitive Index (NCI) Calculator.

Side channel used to cross-validate the self-reported CWI; never folded
into it.

    ASFN = mean(cognitive_reflection, delay_discounting, financial_numeracy) x 100
           (full questionnaire), or financial_numeracy x 100 (legacy records)
    LCA  = loan_consequence_awareness / 3 x 100
    NCI  = round1(0.5 x ASFN + 0.5 x LCA)

Both ASFN paths stay supported so recomputed legacy records remain
comparable with their stored scores.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from finpsych import constants
from finpsych.scorers.normalization import round1

ASFN_CONSTRUCTS = ("cognitive_reflection", "delay_discounting", "financial_numeracy")

ASFN_PATH_FULL = "full"
ASFN_PATH_LEGACY = "legacy"


@dataclass
class NCIBreakdown:
    """NCI with its sub-indices."""

    nci_score: float
    asfn_score: float
    lca_score: float
    asfn_path: str  # "full" or "legacy"
    asfn_tier: str  # HIGH / MEDIUM / LOW

    def to_dict(self) -> dict:
        return {
            "nci_score": self.nci_score,
            "asfn_score": self.asfn_score,
            "lca_score": self.lca_score,
            "asfn_path": self.asfn_path,
            "asfn_tier": self.asfn_tier,
        }


def asfn_tier(asfn_score: float) -> str:
    for tier, threshold in constants.ASFN_TIERS:
        if asfn_score >= threshold:
            return tier
    return constants.ASFN_TIERS[-1][0]


def calculate_nci_breakdown(construct_scores: Mapping[str, float]) -> Optional[NCIBreakdown]:
    """Compute the NCI and its sub-indices, or None when numeracy or LCA data is missing."""
    financial_numeracy = construct_scores.get("financial_numeracy")
    loan_consequence = construct_scores.get("loan_consequence_awareness")
    if financial_numeracy is None or loan_consequence is None:
        return None

    if all(c in construct_scores for c in ASFN_CONSTRUCTS):
        asfn = sum(construct_scores[c] for c in ASFN_CONSTRUCTS) / len(ASFN_CONSTRUCTS) * 100
        path = ASFN_PATH_FULL
    else:
        asfn = financial_numeracy * 100
        path = ASFN_PATH_LEGACY

    lca = loan_consequence / constants.LCA_MAX_POINTS_PER_QUESTION * 100
    nci = round1(constants.NCI_ASFN_WEIGHT * asfn + constants.NCI_LCA_WEIGHT * lca)

    return NCIBreakdown(
        nci_score=nci,
        asfn_score=round1(asfn),
        lca_score=round1(lca),
        asfn_path=path,
        asfn_tier=asfn_tier(asfn),
    )


def calculate_nci(construct_scores: Mapping[str, float]) -> Optional[float]:
    """NCI on 0-100, or None when numeracy or LCA data is missing."""
    breakdown = calculate_nci_breakdown(construct_scores)
    return breakdown.nci_score if breakdown else None
