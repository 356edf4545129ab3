"""
Logging setup for the scoring scripts.

Provides:
- Millisecond timestamps with aligned levels
- key=value structured suffixes
- Optional log file
- Warning/error tracking for the end-of-run summary

The scoring library itself only uses module loggers
(``logging.getLogger(__name__)``); this class configures where they go.
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S,%f"


class MillisecondsFormatter(logging.Formatter):
    """Formatter whose %f renders milliseconds (3 digits)."""

    def formatTime(self, record, datefmt=None):  # noqa: N802 - must match parent class method name
        ct = datetime.fromtimestamp(record.created)
        if datefmt and "%f" in datefmt:
            return ct.strftime(datefmt.replace(",%f", "")) + f",{int(record.msecs):03d}"
        elif datefmt:
            return ct.strftime(datefmt)
        return ct.strftime("%Y-%m-%d %H:%M:%S") + f",{int(record.msecs):03d}"


def _with_fields(message: str, fields: dict) -> str:
    if not fields:
        return message
    formatted = " ".join(f"{k}={v}" for k, v in fields.items())
    return f"{message} [{formatted}]"


class ScoringLogger:
    """
    Run-level logger for batch scoring.

    Routes the ``finpsych`` package loggers through one formatted handler and
    keeps the warnings/errors of the run for the summary.
    """

    def __init__(
        self,
        name: str = "finpsych",
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        log_dir: Optional[Path] = None,
    ):
        """
        Args:
            name: Logger name; "finpsych" also captures the library's module loggers
            log_level: DEBUG, INFO, WARNING or ERROR
            log_file: Optional log file name
            log_dir: Directory for log files (defaults to ./logs)
        """
        level = getattr(logging, log_level.upper())
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        if self.logger.handlers:
            self.logger.handlers.clear()

        formatter = MillisecondsFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            log_dir = log_dir or Path.cwd() / "logs"
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / log_file

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

            self.info(f"Logging to file: {log_path}")

        self.errors = []
        self.warnings = []

    def debug(self, message: str, **kwargs):
        self.logger.debug(_with_fields(message, kwargs), stacklevel=2)

    def info(self, message: str, **kwargs):
        self.logger.info(_with_fields(message, kwargs), stacklevel=2)

    def warning(self, message: str, **kwargs):
        """Log warning message and track for reporting."""
        message = _with_fields(message, kwargs)
        self.logger.warning(message, stacklevel=2)
        self.warnings.append({"message": message, "timestamp": datetime.now().isoformat(), "data": kwargs})

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log error message and track for reporting."""
        if exception:
            message = f"{message} | Exception: {exception}"
        message = _with_fields(message, kwargs)
        self.logger.error(message, stacklevel=2)
        self.errors.append(
            {
                "message": message,
                "exception": str(exception) if exception else None,
                "timestamp": datetime.now().isoformat(),
                "data": kwargs,
            }
        )

    def log_run_start(self, num_submissions: int, model_version: str):
        self.info("=" * 60)
        self.info(
            f"Recompute started - {num_submissions} submissions",
            num_submissions=num_submissions,
            model_version=model_version,
        )
        self.info("=" * 60)

    def log_submission_scored(self, submission_id: str, cwi_0_100, risk_band: str, flags: int):
        """Per-submission line (debug level to keep parallel runs readable)."""
        self.debug(
            "Scored submission",
            submission_id=submission_id,
            cwi_0_100=cwi_0_100,
            risk_band=risk_band,
            flags=flags,
        )

    def log_run_complete(self, succeeded: int, failed: int, duration_seconds: float):
        self.info("=" * 60)
        self.info(
            "Recompute completed",
            succeeded=succeeded,
            failed=failed,
            total=succeeded + failed,
            duration_seconds=round(duration_seconds, 2),
        )
        self.info("=" * 60)

    @contextmanager
    def time_run(self, operation: str):
        """
        Time a block and log its duration; failures are logged and re-raised.

        Usage:
            with logger.time_run("load calibration"):
                config = load_config(path)
        """
        start_time = datetime.now()
        try:
            yield
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            self.error(f"Failed {operation}", exception=e, duration_seconds=round(duration, 2))
            raise
        duration = (datetime.now() - start_time).total_seconds()
        self.debug(f"Completed {operation}", duration_seconds=round(duration, 2))

    def get_error_summary(self) -> dict:
        return {
            "total_errors": len(self.errors),
            "total_warnings": len(self.warnings),
            "errors": self.errors,
            "warnings": self.warnings,
        }


def setup_logger(log_level: str = "INFO", log_file: Optional[str] = None) -> ScoringLogger:
    """Configure the finpsych loggers for a script run."""
    return ScoringLogger(log_level=log_level, log_file=log_file)
