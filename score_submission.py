#!/usr/bin/env python3
"""Score breakdown: show construct, 5Cs and consistency detail for submissions.

Each input file is JSON, either {"country": ..., "responses": {...}} or a bare
question id -> answer map (country then comes from --country).

Usage:
    python score_submission.py submission.json
    python score_submission.py a.json b.json --country Kenya
    python score_submission.py submission.json --config config/calibration.yaml --report
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from finpsych.config import DEFAULT_CONFIG, load_config
from finpsych.pipeline import score_submission
from finpsych.scorers.constructs import ScoringError
from finpsych.utils.logger import setup_logger
from finpsych.validators.consistency_validator import format_validation_report

load_dotenv()
console = Console()

RISK_BAND_STYLES = {
    "LOW": "green",
    "MODERATE": "yellow",
    "HIGH": "dark_orange",
    "VERY_HIGH": "red",
    "UNKNOWN": "dim",
}


def load_submission(path: Path, default_country: str) -> tuple[dict, str]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and isinstance(data.get("responses"), dict):
        return data["responses"], data.get("country") or default_country
    return data, default_country


def _fmt(value, digits: int = 1) -> str:
    return "N/A" if value is None else f"{value:.{digits}f}"


def display_breakdown(name: str, scores, show_report: bool = False) -> None:
    scoring = scores.scoring
    band_style = RISK_BAND_STYLES.get(scoring.risk_band.value, "white")

    summary = (
        f"CWI (0-100): {_fmt(scoring.cwi_0_100)}  |  "
        f"Risk: [{band_style}]{scoring.risk_band.value}[/{band_style}]  |  "
        f"Percentile: {_fmt(scoring.risk_percentile, 2)}\n"
        f"CWI raw: {_fmt(scoring.cwi_raw, 2)}  |  Normalized z: {_fmt(scoring.cwi_normalized, 2)}  |  "
        f"Country: {scoring.country or 'N/A'}\n"
        f"NCI: {_fmt(scoring.nci_score)}  |  "
        f"FinPsych: {_fmt(scores.finpsych.score) if scores.finpsych else 'N/A'}  |  "
        f"Quality: {scores.quality_badge.label} ({scores.gaming_risk_level.value})\n"
        f"Model version: {scoring.model_version}"
    )
    console.print(Panel(summary, title=name, border_style="blue"))

    five_cs = Table(title="5Cs")
    five_cs.add_column("Category", style="cyan")
    five_cs.add_column("Score", justify="right")
    for category, value in scoring.five_c_scores.model_dump().items():
        five_cs.add_row(category, _fmt(value))
    console.print(five_cs)

    constructs = Table(title="Constructs")
    constructs.add_column("Construct", style="cyan")
    constructs.add_column("Mean", justify="right")
    constructs.add_column("z", justify="right")
    for construct, mean in sorted(scoring.construct_scores.items()):
        constructs.add_row(construct, f"{mean:.2f}", _fmt(scoring.construct_z_scores.get(construct), 2))
    console.print(constructs)

    if scores.nci:
        console.print(
            f"  ASFN {scores.nci.asfn_score} ({scores.nci.asfn_tier}, {scores.nci.asfn_path} path) | "
            f"LCA {scores.nci.lca_score}"
        )

    validation = scores.validation
    if validation.flags:
        flags = Table(title=f"Consistency flags ({validation.inconsistencies_detected}/{validation.total_checks})")
        flags.add_column("Check", style="cyan")
        flags.add_column("Severity", justify="center")
        flags.add_column("Description")
        for flag in validation.flags:
            color = "red" if flag.severity.value == "HIGH" else "yellow"
            flags.add_row(flag.check_id, f"[{color}]{flag.severity.value}[/{color}]", flag.description)
        console.print(flags)
    else:
        console.print("  [green]No consistency flags[/green]")

    if show_report:
        console.print(format_validation_report(validation), markup=False)


def main():
    parser = argparse.ArgumentParser(description="Show the scoring breakdown for questionnaire submissions")
    parser.add_argument("files", nargs="+", type=Path, help="Submission JSON file(s)")
    parser.add_argument("--country", type=str, default="Other", help="Country when the file has none")
    parser.add_argument(
        "--config",
        type=str,
        default=os.getenv("FINPSYCH_CALIBRATION"),
        help="Calibration YAML (default: $FINPSYCH_CALIBRATION or built-in tables)",
    )
    parser.add_argument("--report", action="store_true", help="Also print the plain-text consistency report")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON instead of tables")
    parser.add_argument("--log-level", type=str, default=os.getenv("FINPSYCH_LOG_LEVEL", "WARNING"))
    args = parser.parse_args()

    setup_logger(log_level=args.log_level)
    config = load_config(args.config) if args.config else DEFAULT_CONFIG

    exit_code = 0
    for path in args.files:
        try:
            responses, country = load_submission(path, args.country)
            scores = score_submission(responses, country, config)
        except (OSError, json.JSONDecodeError, ScoringError) as e:
            console.print(f"[red]{path}: {e}[/red]")
            exit_code = 1
            continue

        if args.json:
            print(json.dumps(scores.to_dict(), indent=2, ensure_ascii=False))
        else:
            display_breakdown(str(path), scores, show_report=args.report)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
