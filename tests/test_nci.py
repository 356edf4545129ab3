"""Tests for the Neurocognitive Index side channel."""

import pytest

from finpsych.scorers.constructs import aggregate_constructs
from finpsych.scorers.nci import asfn_tier, calculate_nci, calculate_nci_breakdown


class TestCalculateNci:
    """NCI = round1(0.5 x ASFN + 0.5 x LCA)."""

    def test_legacy_path(self):
        """Numeracy 0.2 and LCA 1.8: ASFN 20, LCA 60, NCI 40."""
        assert calculate_nci({"financial_numeracy": 0.2, "loan_consequence_awareness": 1.8}) == 40.0

    def test_full_path_averages_three_constructs(self):
        scores = {
            "cognitive_reflection": 1.0,
            "delay_discounting": 0.0,
            "financial_numeracy": 0.5,
            "loan_consequence_awareness": 1.5,
        }
        assert calculate_nci(scores) == 50.0

    def test_rounded_to_one_decimal(self):
        scores = {"financial_numeracy": 1 / 3, "loan_consequence_awareness": 1.0}
        assert calculate_nci(scores) == 33.3

    def test_missing_lca_is_none(self):
        assert calculate_nci({"financial_numeracy": 1.0, "cognitive_reflection": 1.0}) is None

    def test_missing_numeracy_is_none(self):
        """CRT and delay discounting alone cannot produce an NCI."""
        scores = {"cognitive_reflection": 1.0, "delay_discounting": 1.0, "loan_consequence_awareness": 3.0}
        assert calculate_nci(scores) is None

    def test_clean_submission(self, clean_responses):
        assert calculate_nci(aggregate_constructs(clean_responses)) == 100.0

    def test_not_affected_by_five_c_constructs(self):
        base = {"financial_numeracy": 0.2, "loan_consequence_awareness": 1.8}
        assert calculate_nci({**base, "self_control": 1.0, "payment_history": 5.0}) == calculate_nci(base)


class TestNciBreakdown:
    """Sub-indices, ASFN path and tier."""

    def test_legacy_breakdown(self):
        breakdown = calculate_nci_breakdown({"financial_numeracy": 0.2, "loan_consequence_awareness": 1.8})
        assert breakdown.asfn_path == "legacy"
        assert breakdown.asfn_score == 20.0
        assert breakdown.lca_score == 60.0
        assert breakdown.asfn_tier == "LOW"

    def test_full_breakdown(self, clean_responses):
        breakdown = calculate_nci_breakdown(aggregate_constructs(clean_responses))
        assert breakdown.asfn_path == "full"
        assert breakdown.asfn_score == 100.0
        assert breakdown.lca_score == 100.0
        assert breakdown.asfn_tier == "HIGH"

    def test_to_dict(self):
        breakdown = calculate_nci_breakdown({"financial_numeracy": 0.2, "loan_consequence_awareness": 1.8})
        assert breakdown.to_dict() == {
            "nci_score": 40.0,
            "asfn_score": 20.0,
            "lca_score": 60.0,
            "asfn_path": "legacy",
            "asfn_tier": "LOW",
        }

    def test_none_when_incomplete(self):
        assert calculate_nci_breakdown({}) is None

    @pytest.mark.parametrize(
        "score,tier",
        [(100.0, "HIGH"), (75.0, "HIGH"), (74.9, "MEDIUM"), (50.0, "MEDIUM"), (49.9, "LOW"), (0.0, "LOW")],
    )
    def test_asfn_tiers(self, score, tier):
        assert asfn_tier(score) == tier
