"""Shared fixtures for scoring engine tests.

``clean_responses`` is a complete, internally consistent submission:
no consistency check fires and every construct has data.
"""

import json
import sys
from pathlib import Path

import pytest

# Add repo root to path so tests can import finpsych without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

CRISIS_RANKING_BEST = json.dumps(
    [
        "Contact lender",
        "Work extra hours",
        "Borrow from family/friends",
        "Sell assets",
        "Prioritise other expenses",
        "Skip payments",
    ]
)


def _clean_responses() -> dict:
    responses = {
        # Demographics and gaming detection (never scored)
        "dem_age": "25-34",
        "dem_gender": "Female",
        "gd1": "Sometimes",
        # Payment history
        "q1": "Never",
        "q2": "Never",
        "q3": "Never",
        "q4": "Never",
        "q5": "Never",
        "q10": "Often",
        # Financial management
        "q7": "Often",
        "q8": "Often",
        "q9": "Often",
        "q11": "Often",
        "q12": "Often",
        "q13": "Often",
        # Crisis management
        "q6": "Rarely",
        "q16": CRISIS_RANKING_BEST,
        "q50": "Often",
        # Financial integrity (likelihood scale)
        "q16a": "Very likely",
        "q16c": "Very unlikely",
        "q16d": "Unlikely",
        "q16f": "Likely",
        # Emergency preparedness
        "q14a": "Likely",
        "q14b": "Unlikely",
        "q14c": "Unlikely",
        "q15": "4–6 months",
        # Social collateral
        "q59": "3–5 people",
        "q16b": "Likely",
        "q16e": "Unlikely",
        # Future orientation
        "q60": "Often",
        "q61": "Often",
        # Locus of control (all internal)
        "q54": "My financial security depends mainly on my own actions.",
        "q55": "Financial planning helps me achieve goals.",
        "q56": "Financial success comes from hard work.",
        "q57": "I can achieve the financial goals I set.",
        "q58": "I am responsible for my financial well-being.",
        # Self control
        "q47": "Often",
        "q48": "Rarely",
        "q49": "Rarely",
        "q51": "Often",
        "q52": "Often",
        "q53": "Often",
        # Neurocognitive
        "q62": "₦50",
        "q63": "B: ₦7,500 in one month",
        "q64": "₦700",
        "q65": "Lender A (₦5,000 interest)",
        "lca1": "A) Penalty fees and a damaged credit record",
        "lca2": "C) Contact the lender before the due date",
        "lca3": "A) The total cost of the loan increases",
        "lca4": "B) Future lenders may refuse credit",
        "lca5": "C) Read the full repayment terms",
    }
    for q in ("q17", "q18", "q19", "q20", "q21"):  # conscientiousness
        responses[q] = "Often"
    for q in ("q22", "q23", "q24", "q25", "q26"):  # emotional stability (reversed)
        responses[q] = "Rarely"
    for q in ("q27", "q28", "q29", "q30", "q31"):  # agreeableness
        responses[q] = "Often"
    for q in ("q32", "q33", "q34", "q35", "q36"):  # openness
        responses[q] = "Sometimes"
    for q in ("q37", "q38", "q39", "q40", "q41"):  # extraversion
        responses[q] = "Sometimes"
    for q in ("q42", "q43", "q44", "q45", "q46"):  # risk preference
        responses[q] = "Sometimes"
    return responses


@pytest.fixture
def clean_responses():
    """Complete submission that raises no consistency flags."""
    return _clean_responses()


@pytest.fixture
def three_flag_responses():
    """Clean submission altered to trip exactly three checks (7, 10, 14)."""
    responses = _clean_responses()
    responses.update(
        {
            # CHECK_7: thinks about the future very often, small decisions don't matter
            "q60": "Very often",
            "q61": "Rarely",
            # CHECK_10: duplicate asset-selling items 4 points apart
            "q14b": "Very likely",
            "q16e": "Very unlikely",
            # CHECK_14: always budgets, never tracks
            "q11": "Always",
            "q8": "Never",
        }
    )
    return responses


@pytest.fixture
def demographics_only():
    """Submission with nothing that maps to a 5Cs construct."""
    return {
        "dem_age": "35-44",
        "dem_country": "Kenya",
        "gd1": "Always",
        "gd2": "Never",
        "q1": "N/A - I have no bills",
    }


@pytest.fixture
def calibration_file(tmp_path):
    """Write a calibration YAML and return its path."""

    def _write(text: str) -> Path:
        path = tmp_path / "calibration.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
