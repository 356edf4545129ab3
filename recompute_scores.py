#!/usr/bin/env python3
"""Recompute scores: re-feed stored submissions through the current engine.

Reads a JSON Lines export (one submission per line) and writes one result
per line. Previous derived values are snapshotted under "previous_scores" so
a recompute can be audited or rolled back.

Input line:
    {"id": "...", "country": "Nigeria", "responses": {"q1": "Never", ...},
     "model_version": "1.1.0", "cwi_0_100": 61.2, "nci_score": 40.0, ...}

By default only records whose model_version differs from the current one are
recomputed; --force recomputes everything.

Usage:
    python recompute_scores.py export.jsonl --output recomputed.jsonl
    python recompute_scores.py export.jsonl --dry-run --limit 20 --verbose
    python recompute_scores.py export.jsonl --config config/calibration.yaml --workers 8
"""

import argparse
import json
import os
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from finpsych.config import DEFAULT_CONFIG, ScoringConfig, load_config
from finpsych.pipeline import score_submission
from finpsych.utils.logger import ScoringLogger
from finpsych.utils.worker_pool import WorkerPool

load_dotenv()
console = Console()

# Stored fields snapshotted before they are overwritten
SNAPSHOT_FIELDS = (
    "model_version",
    "cwi_raw",
    "cwi_normalized",
    "cwi_0_100",
    "risk_band",
    "nci_score",
    "consistency_score",
    "gaming_risk_level",
    "finpsych_score",
)


def read_records(path: Path, limit: Optional[int] = None) -> list[dict]:
    records = []
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{line_number}: invalid JSON ({e})") from e
            record.setdefault("id", str(line_number))
            records.append(record)
            if limit and len(records) >= limit:
                break
    return records


def needs_recompute(record: dict, config: ScoringConfig, force: bool = False) -> bool:
    return force or record.get("model_version") != config.model_version


def snapshot(record: dict) -> dict:
    return {
        "snapshot_at": datetime.now(timezone.utc).isoformat(),
        **{name: record.get(name) for name in SNAPSHOT_FIELDS},
    }


def recompute_record(record: dict, config: ScoringConfig) -> dict:
    """Score one stored record; raises ScoringError for unscorable submissions."""
    responses = record.get("responses")
    if not isinstance(responses, dict):
        raise ValueError("record has no 'responses' mapping")

    scores = score_submission(responses, record.get("country"), config)
    scoring = scores.scoring

    return {
        "id": record["id"],
        "country": scoring.country,
        "model_version": scoring.model_version,
        "scored_at": scoring.scored_at,
        "five_c_scores": scoring.five_c_scores.model_dump(),
        "cwi_raw": scoring.cwi_raw,
        "cwi_normalized": scoring.cwi_normalized,
        "cwi_0_100": scoring.cwi_0_100,
        "risk_band": scoring.risk_band.value,
        "risk_percentile": scoring.risk_percentile,
        "nci_score": scoring.nci_score,
        "nci": scores.nci.to_dict() if scores.nci else None,
        "consistency_score": scores.validation.consistency_score,
        "gaming_risk_level": scores.gaming_risk_level.value,
        "quality_badge": scores.quality_badge.label,
        "validation_result": scores.validation.model_dump(mode="json"),
        "finpsych_score": scores.finpsych.score if scores.finpsych else None,
        "previous_scores": snapshot(record),
    }


def display_summary(outcomes: list, skipped: int, verbose: bool = False) -> None:
    succeeded = [result for ok, _, result in outcomes if ok]
    failed = [(record, error) for ok, record, error in outcomes if not ok]

    summary = (
        f"Recomputed: {len(succeeded)}\n"
        f"Skipped (current version): {skipped}\n"
        f"Errors: {len(failed)}"
    )
    console.print(Panel(summary, title="Recompute Summary", border_style="blue"))

    if verbose and succeeded:
        table = Table(title="Changes")
        table.add_column("ID", style="cyan")
        table.add_column("CWI (old -> new)", justify="right")
        table.add_column("NCI (old -> new)", justify="right")
        table.add_column("Gaming risk", justify="center")
        for result in succeeded:
            previous = result["previous_scores"]
            table.add_row(
                str(result["id"]),
                f"{previous.get('cwi_0_100')} -> {result['cwi_0_100']}",
                f"{previous.get('nci_score')} -> {result['nci_score']}",
                result["gaming_risk_level"],
            )
        console.print(table)

    for record, error in failed:
        console.print(f"  [red]ERROR[/red] {record.get('id')}: {error}")


def main():
    parser = argparse.ArgumentParser(description="Recompute derived scores for stored submissions")
    parser.add_argument("input", type=Path, help="JSON Lines export of submissions")
    parser.add_argument("--output", type=Path, help="Write recomputed records here (JSON Lines)")
    parser.add_argument(
        "--config",
        type=str,
        default=os.getenv("FINPSYCH_CALIBRATION"),
        help="Calibration YAML (default: $FINPSYCH_CALIBRATION or built-in tables)",
    )
    parser.add_argument("--workers", type=int, default=4, help="Number of parallel workers (default: 4)")
    parser.add_argument("--limit", type=int, help="Process only the first N records")
    parser.add_argument("--force", action="store_true", help="Recompute records already on the current version")
    parser.add_argument("--dry-run", action="store_true", help="Score but do not write output")
    parser.add_argument("--verbose", action="store_true", help="Show per-record changes")
    parser.add_argument("--log-file", type=str, help="Also log to logs/<name>")
    args = parser.parse_args()

    logger = ScoringLogger(
        log_level=os.getenv("FINPSYCH_LOG_LEVEL", "DEBUG" if args.verbose else "INFO"),
        log_file=args.log_file,
    )

    with logger.time_run("load calibration"):
        config = load_config(args.config) if args.config else DEFAULT_CONFIG

    try:
        records = read_records(args.input, args.limit)
    except (OSError, ValueError) as e:
        logger.error("Could not read input", exception=e, path=str(args.input))
        sys.exit(1)

    pending = [r for r in records if needs_recompute(r, config, args.force)]
    skipped = len(records) - len(pending)

    logger.log_run_start(len(pending), config.model_version)
    start = time.monotonic()

    pool = WorkerPool(max_workers=args.workers, logger=logger.logger)
    outcomes = pool.map(lambda record: recompute_record(record, config), pending, desc="Recompute")

    for ok, record, result in outcomes:
        if ok:
            logger.log_submission_scored(
                str(record["id"]),
                result["cwi_0_100"],
                result["risk_band"],
                result["validation_result"]["inconsistencies_detected"],
            )
        else:
            logger.error("Recompute failed", exception=result, submission_id=record.get("id"))

    stats = pool.get_stats()
    logger.log_run_complete(stats["total_successful"], stats["total_failed"], time.monotonic() - start)

    if args.output and not args.dry_run:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            for ok, _, result in outcomes:
                if ok:
                    f.write(json.dumps(result, ensure_ascii=False) + "\n")
        logger.info(f"Wrote {stats['total_successful']} records", path=str(args.output))

    display_summary(outcomes, skipped, verbose=args.verbose)
    sys.exit(1 if stats["total_failed"] else 0)


if __name__ == "__main__":
    main()
