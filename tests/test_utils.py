"""Tests for the run logger and the worker pool."""

import logging

import pytest

from finpsych.utils.logger import ScoringLogger, _with_fields
from finpsych.utils.worker_pool import WorkerPool


def _square(value):
    if value < 0:
        raise ValueError(f"negative: {value}")
    return value * value


class TestWorkerPool:
    def test_results_in_input_order(self):
        pool = WorkerPool(max_workers=4)
        outcomes = pool.map(_square, list(range(10)))
        assert [result for _, _, result in outcomes] == [i * i for i in range(10)]
        assert all(ok for ok, _, _ in outcomes)

    def test_failures_are_collected(self):
        pool = WorkerPool(max_workers=2)
        outcomes = pool.map(_square, [1, -1, 2])
        assert [ok for ok, _, _ in outcomes] == [True, False, True]
        ok, item, error = outcomes[1]
        assert item == -1
        assert isinstance(error, ValueError)

    def test_stats(self):
        pool = WorkerPool(max_workers=2)
        pool.map(_square, [1, -1, 2, 3])
        stats = pool.get_stats()
        assert stats["total_submitted"] == 4
        assert stats["total_completed"] == 4
        assert stats["total_successful"] == 3
        assert stats["total_failed"] == 1

    def test_empty(self):
        assert WorkerPool().map(_square, []) == []


class TestScoringLogger:
    @pytest.fixture
    def run_logger(self):
        scoring_logger = ScoringLogger(name="finpsych_test_run", log_level="DEBUG")
        yield scoring_logger
        scoring_logger.logger.handlers.clear()

    def test_fields_suffix(self):
        assert _with_fields("Scored", {"cwi": 58.1, "band": "LOW"}) == "Scored [cwi=58.1 band=LOW]"
        assert _with_fields("Scored", {}) == "Scored"

    def test_tracks_warnings_and_errors(self, run_logger):
        run_logger.warning("Odd answer", question_id="q17")
        run_logger.error("Recompute failed", exception=ValueError("boom"), submission_id="s1")
        summary = run_logger.get_error_summary()
        assert summary["total_warnings"] == 1
        assert summary["total_errors"] == 1
        assert summary["errors"][0]["exception"] == "boom"
        assert "submission_id=s1" in summary["errors"][0]["message"]

    def test_time_run_reraises(self, run_logger):
        with pytest.raises(RuntimeError):
            with run_logger.time_run("load calibration"):
                raise RuntimeError("bad file")
        assert run_logger.get_error_summary()["total_errors"] == 1

    def test_log_file(self, tmp_path):
        scoring_logger = ScoringLogger(name="finpsych_test_file", log_file="run.log", log_dir=tmp_path)
        scoring_logger.log_run_start(3, "1.2.0")
        for handler in scoring_logger.logger.handlers:
            handler.flush()
        text = (tmp_path / "run.log").read_text(encoding="utf-8")
        assert "Recompute started - 3 submissions" in text
        for handler in scoring_logger.logger.handlers:
            handler.close()
        scoring_logger.logger.handlers.clear()

    def test_level(self, run_logger):
        assert run_logger.logger.level == logging.DEBUG
        assert run_logger.logger.propagate is False
