"""Tests for end-to-end submission scoring and the recompute script."""

import json
from dataclasses import replace
from types import MappingProxyType

import pytest

import recompute_scores
from finpsych import constants
from finpsych.config import DEFAULT_CONFIG
from finpsych.pipeline import score_submission
from finpsych.schemas.enums import DataReliabilityLevel, GamingRiskLevel, RiskBand
from finpsych.scorers.constructs import ScoringError
from finpsych.scorers.engine import calculate_cwi

# ─── score_submission ────────────────────────────────────────────────────────


class TestScoreSubmission:
    def test_clean_submission(self, clean_responses):
        scores = score_submission(clean_responses, "Other")
        assert scores.scoring.cwi_0_100 == 58.1
        assert scores.gaming_risk_level == GamingRiskLevel.MINIMAL
        assert scores.quality_badge.label == "EXCELLENT"
        assert scores.nci.nci_score == scores.scoring.nci_score == 100.0
        assert scores.finpsych.reliability == DataReliabilityLevel.HIGH
        # 58.1 x 0.5 + 100 x 0.5
        assert scores.finpsych.score == pytest.approx(79.05, abs=0.06)

    def test_three_flag_submission(self, three_flag_responses):
        scores = score_submission(three_flag_responses, "Other")
        assert scores.validation.consistency_score == 79
        assert scores.gaming_risk_level == GamingRiskLevel.MODERATE
        assert scores.quality_badge.label == "MODERATE"
        assert scores.finpsych.reliability == DataReliabilityLevel.MODERATE

    def test_flags_do_not_change_cwi(self, three_flag_responses):
        """Validation is advisory: a flagged submission scores exactly as calculate_cwi does."""
        scores = score_submission(three_flag_responses, "Other")
        assert scores.scoring.scored_values() == calculate_cwi(three_flag_responses, "Other").scored_values()

    def test_unscorable_cwi(self, demographics_only):
        scores = score_submission(demographics_only, "Kenya")
        assert scores.scoring.risk_band == RiskBand.UNKNOWN
        assert scores.nci is None
        assert scores.finpsych is None
        assert scores.gaming_risk_level == GamingRiskLevel.MINIMAL

    def test_decoded_answers_score_and_validate(self, clean_responses):
        clean_responses.update({"q9": ["Often"], "q10": {"choice": "Always"}, "q48": ["Always"]})
        scores = score_submission(clean_responses, "Kenya")
        assert scores.validation.total_checks == 16
        assert scores.scoring.cwi_0_100 is not None

    def test_to_dict_is_json_serializable(self, three_flag_responses):
        data = score_submission(three_flag_responses, "Nigeria").to_dict()
        decoded = json.loads(json.dumps(data))
        assert decoded["gaming_risk_level"] == "MODERATE"
        assert decoded["validation"]["inconsistencies_detected"] == 3
        assert decoded["scoring"]["country"] == "Nigeria"


# ─── recompute_scores ────────────────────────────────────────────────────────


class TestRecomputeScores:
    def test_read_records(self, tmp_path):
        path = tmp_path / "export.jsonl"
        path.write_text('{"id": "a", "responses": {}}\n\n{"responses": {}}\n{"id": "c"}\n', encoding="utf-8")
        records = recompute_scores.read_records(path)
        assert [r["id"] for r in records] == ["a", "3", "c"]

    def test_read_records_limit(self, tmp_path):
        path = tmp_path / "export.jsonl"
        path.write_text("\n".join(json.dumps({"id": str(i)}) for i in range(5)), encoding="utf-8")
        assert len(recompute_scores.read_records(path, limit=2)) == 2

    def test_read_records_invalid_json(self, tmp_path):
        path = tmp_path / "export.jsonl"
        path.write_text('{"id": "a"}\nnot json\n', encoding="utf-8")
        with pytest.raises(ValueError, match=":2:"):
            recompute_scores.read_records(path)

    def test_needs_recompute(self):
        assert recompute_scores.needs_recompute({"model_version": "1.1.0"}, DEFAULT_CONFIG)
        assert not recompute_scores.needs_recompute({"model_version": constants.MODEL_VERSION}, DEFAULT_CONFIG)
        assert recompute_scores.needs_recompute(
            {"model_version": constants.MODEL_VERSION}, DEFAULT_CONFIG, force=True
        )

    def test_recompute_record_snapshots_previous_scores(self, clean_responses):
        record = {
            "id": "sub-1",
            "country": "Other",
            "responses": clean_responses,
            "model_version": "1.1.0",
            "cwi_0_100": 61.2,
            "nci_score": 40.0,
        }
        result = recompute_scores.recompute_record(record, DEFAULT_CONFIG)
        assert result["id"] == "sub-1"
        assert result["model_version"] == constants.MODEL_VERSION
        assert result["cwi_0_100"] == 58.1
        assert result["risk_band"] == "MODERATE"
        assert result["quality_badge"] == "EXCELLENT"
        assert result["previous_scores"]["model_version"] == "1.1.0"
        assert result["previous_scores"]["cwi_0_100"] == 61.2
        json.dumps(result)

    def test_recompute_record_without_responses(self):
        with pytest.raises(ValueError, match="responses"):
            recompute_scores.recompute_record({"id": "x"}, DEFAULT_CONFIG)

    def test_lca_overflow_is_a_scoring_error(self):
        """Batch runs report the error per record instead of clamping."""
        config = replace(
            DEFAULT_CONFIG,
            question_construct_map=MappingProxyType(
                {**constants.QUESTION_CONSTRUCT_MAP, "lca6": "loan_consequence_awareness"}
            ),
            lca_points=MappingProxyType({**constants.LCA_POINTS, "lca6": MappingProxyType({"A)": 3})}),
        )
        responses = {
            "lca1": "A) x",
            "lca2": "C) x",
            "lca3": "A) x",
            "lca4": "B) x",
            "lca5": "C) x",
            "lca6": "A) x",
        }
        with pytest.raises(ScoringError):
            recompute_scores.recompute_record({"id": "x", "responses": responses}, config)
