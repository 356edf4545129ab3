"""Tests for 5Cs aggregation, CWI raw, country normalization and risk bands."""

from dataclasses import replace
from types import MappingProxyType

import pytest

from finpsych.config import DEFAULT_CONFIG
from finpsych.schemas.enums import RiskBand
from finpsych.schemas.results import FiveCScores
from finpsych.scorers.constructs import aggregate_constructs
from finpsych.scorers.five_cs import aggregate_five_cs, calculate_cwi_raw, rescale_likert
from finpsych.scorers.normalization import (
    assign_risk_band,
    convert_to_0_100,
    normalize_by_country,
    round_half_up,
    z_score_to_percentile,
)

# ─── 5Cs ──────────────────────────────────────────────────────────────────────


class TestRescaleLikert:
    @pytest.mark.parametrize("value,expected", [(1.0, 0.0), (3.0, 50.0), (5.0, 100.0), (4.0, 75.0)])
    def test_linear(self, value, expected):
        assert rescale_likert(value) == pytest.approx(expected)

    def test_clamped(self):
        """Binary constructs (locus 0-1) fall below the Likert floor."""
        assert rescale_likert(0.0) == 0.0
        assert rescale_likert(6.0) == 100.0


class TestAggregateFiveCs:
    """Equal-weight mean of raw construct means per category."""

    def test_clean_submission(self, clean_responses):
        five_cs = aggregate_five_cs(aggregate_constructs(clean_responses))
        assert five_cs.character == pytest.approx(70.0)
        assert five_cs.capacity == pytest.approx(85.4166667)
        assert five_cs.capital == pytest.approx(62.5)
        assert five_cs.collateral == pytest.approx(50.0)
        assert five_cs.conditions == pytest.approx(43.75)

    def test_empty_categories_are_none(self):
        five_cs = aggregate_five_cs({})
        assert five_cs == FiveCScores()
        assert five_cs.present() == {}

    def test_partial_data(self):
        five_cs = aggregate_five_cs({"social_collateral": 5.0})
        assert five_cs.collateral == 100.0
        assert five_cs.character is None
        assert five_cs.capital is None

    def test_neurocognitive_constructs_ignored(self):
        five_cs = aggregate_five_cs({"cognitive_reflection": 1.0, "loan_consequence_awareness": 3.0})
        assert five_cs.present() == {}

    def test_low_locus_clamped_to_zero(self):
        assert aggregate_five_cs({"locus_of_control": 0.0}).conditions == 0.0


class TestCalculateCwiRaw:
    """Weighted mean renormalized by the weight of categories present."""

    def test_equal_weights(self, clean_responses):
        five_cs = aggregate_five_cs(aggregate_constructs(clean_responses))
        assert calculate_cwi_raw(five_cs) == pytest.approx(62.3333333)

    def test_single_category_renormalized(self):
        assert calculate_cwi_raw(FiveCScores(collateral=80.0)) == pytest.approx(80.0)

    def test_no_categories(self):
        assert calculate_cwi_raw(FiveCScores()) is None

    def test_custom_weights(self):
        config = replace(
            DEFAULT_CONFIG,
            five_c_weights=MappingProxyType(
                {"character": 0.5, "capacity": 0.5, "capital": 0.0, "collateral": 0.0, "conditions": 0.0}
            ),
        )
        assert calculate_cwi_raw(FiveCScores(character=80.0, collateral=20.0), config) == pytest.approx(80.0)

    def test_only_zero_weight_categories(self):
        config = replace(
            DEFAULT_CONFIG,
            five_c_weights=MappingProxyType(
                {"character": 1.0, "capacity": 0.0, "capital": 0.0, "collateral": 0.0, "conditions": 0.0}
            ),
        )
        assert calculate_cwi_raw(FiveCScores(collateral=20.0), config) is None


# ─── Normalization ───────────────────────────────────────────────────────────


class TestNormalizeByCountry:
    def test_known_country(self):
        assert normalize_by_country(70.0, "Kenya") == pytest.approx((70.0 - 54.4) / 13.35)

    def test_unmapped_country_uses_other(self):
        assert normalize_by_country(70.0, "Atlantis") == normalize_by_country(70.0, "Other")

    def test_missing_country_uses_other(self):
        assert normalize_by_country(70.0, None) == pytest.approx(1.0)

    def test_country_names_are_exact(self):
        """No case folding: "kenya" is not Kenya."""
        assert normalize_by_country(70.0, "kenya") == normalize_by_country(70.0, "Other")


class TestRoundHalfUp:
    def test_ties_round_up(self):
        assert round_half_up(2.25) == 2.3
        assert round_half_up(0.125, 2) == 0.13

    def test_below_tie(self):
        assert round_half_up(2.24) == 2.2


class TestConvertTo0To100:
    """z in [-3, 3] mapped linearly onto [0, 100]."""

    @pytest.mark.parametrize("z,expected", [(0.0, 50.0), (3.0, 100.0), (-3.0, 0.0), (0.5, 58.3)])
    def test_linear(self, z, expected):
        assert convert_to_0_100(z) == expected

    @pytest.mark.parametrize("z,expected", [(10.0, 100.0), (-10.0, 0.0)])
    def test_clamped(self, z, expected):
        assert convert_to_0_100(z) == expected


class TestZScoreToPercentile:
    def test_center(self):
        assert z_score_to_percentile(0.0) == pytest.approx(0.5, abs=1e-6)

    def test_known_quantile(self):
        assert z_score_to_percentile(1.96) == pytest.approx(0.975, abs=1e-3)

    @pytest.mark.parametrize("z", [0.3, 1.0, 2.5])
    def test_symmetric(self, z):
        assert z_score_to_percentile(z) + z_score_to_percentile(-z) == pytest.approx(1.0, abs=1e-6)

    @pytest.mark.parametrize("z", [-50.0, -3.0, -0.1, 0.1, 3.0, 50.0])
    def test_bounded(self, z):
        assert 0.0 <= z_score_to_percentile(z) <= 1.0


class TestAssignRiskBand:
    """First threshold met, scanning LOW -> VERY_HIGH."""

    @pytest.mark.parametrize(
        "percentile,band",
        [
            (1.0, RiskBand.LOW),
            (0.75, RiskBand.LOW),
            (0.7499, RiskBand.MODERATE),
            (0.40, RiskBand.MODERATE),
            (0.3999, RiskBand.HIGH),
            (0.15, RiskBand.HIGH),
            (0.1499, RiskBand.VERY_HIGH),
            (0.0, RiskBand.VERY_HIGH),
        ],
    )
    def test_thresholds(self, percentile, band):
        assert assign_risk_band(percentile) == band

    def test_none_is_unknown(self):
        assert assign_risk_band(None) == RiskBand.UNKNOWN

    def test_custom_bands(self):
        config = replace(DEFAULT_CONFIG, risk_bands=(("LOW", 0.5), ("VERY_HIGH", 0.0)))
        assert assign_risk_band(0.6, config) == RiskBand.LOW
        assert assign_risk_band(0.49, config) == RiskBand.VERY_HIGH
