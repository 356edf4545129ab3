"""Tests for data reliability and the FinPsych blend."""

import logging

import pytest

from finpsych.schemas.enums import DataReliabilityLevel, GamingRiskLevel
from finpsych.validators.reliability import (
    FINPSYCH_WEIGHTS,
    calculate_finpsych_score,
    get_finpsych_weights,
    get_reliability_from_gaming_risk,
    normalize_gaming_risk_level,
)


class TestReliabilityMapping:
    """Gaming risk level -> base reliability."""

    @pytest.mark.parametrize(
        "level,reliability",
        [
            ("MINIMAL", DataReliabilityLevel.HIGH),
            ("low", DataReliabilityLevel.MODERATE_HIGH),
            (GamingRiskLevel.MODERATE, DataReliabilityLevel.MODERATE),
            ("HIGH", DataReliabilityLevel.LOW),
            ("SEVERE", DataReliabilityLevel.VERY_LOW),
        ],
    )
    def test_levels(self, level, reliability):
        assert get_reliability_from_gaming_risk(level).level == reliability

    @pytest.mark.parametrize(
        "label,level",
        [
            ("GOOD", GamingRiskLevel.MINIMAL),
            ("excellent", GamingRiskLevel.MINIMAL),
            ("FLAGGED", GamingRiskLevel.HIGH),
            ("POOR", GamingRiskLevel.SEVERE),
        ],
    )
    def test_legacy_badge_labels(self, label, level):
        assert normalize_gaming_risk_level(label) == level

    @pytest.mark.parametrize("level", [None, "", "bogus"])
    def test_unknown(self, level):
        assert get_reliability_from_gaming_risk(level) is None

    def test_labels(self):
        assert get_reliability_from_gaming_risk("LOW").label == "MODERATE-HIGH"
        assert get_reliability_from_gaming_risk("SEVERE").label == "VERY LOW"
        assert get_reliability_from_gaming_risk("MINIMAL").label == "HIGH"


class TestFinPsychWeights:
    @pytest.mark.parametrize("reliability", list(DataReliabilityLevel))
    def test_weights_sum_to_one(self, reliability):
        weights = get_finpsych_weights(reliability)
        assert weights.cwi + weights.nci == pytest.approx(1.0)

    def test_nci_weight_grows_as_reliability_drops(self):
        ordered = [FINPSYCH_WEIGHTS[level].nci for level in DataReliabilityLevel]
        assert ordered == sorted(ordered)


class TestCalculateFinPsychScore:
    """round1(cwi x w_cwi + nci x w_nci)."""

    def test_high_reliability(self):
        result = calculate_finpsych_score(60, 40, "MINIMAL", 100)
        assert result.score == 50.0
        assert result.reliability == DataReliabilityLevel.HIGH

    def test_moderate_reliability(self):
        result = calculate_finpsych_score(60, 40, GamingRiskLevel.MODERATE, 79)
        assert result.score == pytest.approx(47.0)
        assert result.reliability == DataReliabilityLevel.MODERATE

    def test_missing_level_defaults_to_moderate(self):
        result = calculate_finpsych_score(60, 40, None, None)
        assert result.reliability == DataReliabilityLevel.MODERATE
        assert result.score == pytest.approx(47.0)

    def test_unknown_level_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="finpsych.validators.reliability"):
            result = calculate_finpsych_score(60, 40, "weird", None)
        assert result.reliability == DataReliabilityLevel.MODERATE
        assert "Unknown gaming risk level" in caplog.text

    @pytest.mark.parametrize(
        "consistency,reliability",
        [
            (100, DataReliabilityLevel.HIGH),
            (75, DataReliabilityLevel.HIGH),
            (74, DataReliabilityLevel.LOW),
            (65, DataReliabilityLevel.LOW),
            (64, DataReliabilityLevel.VERY_LOW),
            (0, DataReliabilityLevel.VERY_LOW),
        ],
    )
    def test_consistency_override(self, consistency, reliability):
        assert calculate_finpsych_score(60, 40, "MINIMAL", consistency).reliability == reliability

    def test_low_consistency_score(self):
        assert calculate_finpsych_score(60, 40, "MINIMAL", 70).score == pytest.approx(45.0)
        assert calculate_finpsych_score(60, 40, "MINIMAL", 50).score == pytest.approx(43.0)

    @pytest.mark.parametrize("cwi,nci", [(None, 40), (60, None), (None, None)])
    def test_missing_inputs(self, cwi, nci):
        assert calculate_finpsych_score(cwi, nci, "MINIMAL", 100) is None

    def test_to_dict(self):
        assert calculate_finpsych_score(60, 40, "MINIMAL", 100).to_dict() == {
            "score": 50.0,
            "reliability": "HIGH",
            "weights": {"cwi": 0.5, "nci": 0.5},
        }
