"""
Consistency Validator - cross-question plausibility checks over raw responses.

Sixteen independent checks, each returning at most one flag:
1. Savings behavior vs emergency savings (q9, q15)
2. Bill payment vs missed payments (q10, q1-q5)
3. Impulse control contradictions and variance (q48, q49, q52, q53)
4. Goal achievement vs locus statement (q13, q57)
5. Emotional stability variance (q22-q26)
6. Locus of control mixed pattern (q54-q58)
7. Future orientation (q60, q61)
8. Social collateral (q59, q16b)
9. Emergency savings vs reliance (q15, q14a)
10. Asset selling duplicate measure (q14b, q16e)
11. Financial discipline variance (q47, q51, q52, q53)
12. Conscientiousness variance (q17-q21)
13. Agreeableness variance (q27-q31)
14. Budgeting without tracking (q11, q8)
15. Openness variance (q32-q36)
16. Extraversion variance (q37-q41)

All checks always run and never raise. Results are advisory: they flag
submissions for review but never block scoring.
"""

import logging
import math
from typing import Callable, Mapping, Optional

from finpsych import constants
from finpsych.schemas.enums import FlagSeverity, Recommendation, SeverityLevel
from finpsych.schemas.results import ConsistencyFlag, ValidationResult

logger = logging.getLogger(__name__)

VARIANCE_THRESHOLD = 1.5
DUPLICATE_MEASURE_GAP = 3
FLAG_PENALTY = 7

# q15 months of savings on a 0-4 scale; unknown or missing is treated as none
SAVINGS_LEVELS = {
    "None": 0,
    "1 month": 1,
    "2–3 months": 2,
    "4–6 months": 3,
    "More than 6 months": 4,
}

_NUMERIC_SCALE = {**constants.LIKERT_MAP, **constants.LIKELIHOOD_MAP}

Responses = Mapping[str, str]


def to_numeric(value) -> int:
    """Frequency or likelihood answer on 1-5; numbers pass through, unknown is 3."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return constants.LIKERT_DEFAULT
    return _NUMERIC_SCALE.get(value, constants.LIKERT_DEFAULT)


def std_dev(values: list) -> float:
    """Population standard deviation."""
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def _answer(responses: Responses, question_id: str, default=None):
    # Empty answers count as missing
    return responses.get(question_id) or default


def _text(responses: Responses, question_id: str) -> Optional[str]:
    # Vocabulary answers only; lists, dicts and numbers match no keyword
    answer = _answer(responses, question_id)
    return answer if isinstance(answer, str) else None


def _numeric(responses: Responses, question_id: str, default: int = constants.LIKERT_DEFAULT) -> int:
    return to_numeric(_answer(responses, question_id, default))


def _flag(number: int, name: str, description: str, severity: FlagSeverity, questions: list) -> ConsistencyFlag:
    return ConsistencyFlag(
        check_id=f"CHECK_{number}",
        check_name=name,
        description=description,
        severity=severity,
        questions=questions,
    )


def _variance_check(
    responses: Responses, number: int, name: str, trait: str, questions: list
) -> Optional[ConsistencyFlag]:
    sd = std_dev([_numeric(responses, q) for q in questions])
    if sd > VARIANCE_THRESHOLD:
        return _flag(
            number, name, f"High variance in {trait} responses (SD={sd:.2f})", FlagSeverity.MEDIUM, questions
        )
    return None


# =============================================================================
# Checks
# =============================================================================


def check_savings_behavior(responses: Responses) -> Optional[ConsistencyFlag]:
    q9 = _numeric(responses, "q9")
    savings_level = SAVINGS_LEVELS.get(_text(responses, "q15"), 0)
    name = "Savings Behavior Mismatch"

    if q9 >= 4 and savings_level == 0:
        frequency = "Always" if q9 >= 5 else "Often"
        return _flag(
            1,
            name,
            f"Claims to save regularly (Q9={frequency}) but has no emergency savings (Q15=None)",
            FlagSeverity.HIGH,
            ["q9", "q15"],
        )
    if q9 <= 2 and savings_level >= 4:
        frequency = "Never" if q9 == 1 else "Rarely"
        return _flag(
            1,
            name,
            f"Claims to rarely save (Q9={frequency}) but has significant emergency savings (Q15=More than 6 months)",
            FlagSeverity.HIGH,
            ["q9", "q15"],
        )
    return None


def check_bill_payment(responses: Responses) -> Optional[ConsistencyFlag]:
    missed_questions = ["q1", "q2", "q3", "q4", "q5"]
    q10 = _numeric(responses, "q10")
    missed = [_numeric(responses, q, default=1) for q in missed_questions]
    high_missed = sum(1 for value in missed if value >= 4)
    name = "Bill Payment Behavior Mismatch"

    if q10 == 5 and high_missed >= 2:
        return _flag(
            2,
            name,
            f"Claims to always pay bills on time (Q10=Always) but frequently misses {high_missed} types of payments",
            FlagSeverity.HIGH,
            ["q10"] + missed_questions,
        )
    if q10 <= 2 and all(value == 1 for value in missed):
        frequency = "Never" if q10 == 1 else "Rarely"
        return _flag(
            2,
            name,
            f"Claims to rarely pay bills on time (Q10={frequency}) but reports never missing any payments",
            FlagSeverity.HIGH,
            ["q10"] + missed_questions,
        )
    return None


def check_impulse_control(responses: Responses) -> Optional[ConsistencyFlag]:
    q48_raw = _numeric(responses, "q48")
    q49_raw = _numeric(responses, "q49")
    q52 = _numeric(responses, "q52")
    q53 = _numeric(responses, "q53")
    name = "Impulse Control Contradiction"

    if q48_raw >= 4 and q52 >= 4:
        return _flag(
            3,
            name,
            "Claims to act impulsively (Q48) but also claims to control spending urges (Q52) - direct contradiction",
            FlagSeverity.HIGH,
            ["q48", "q52"],
        )
    if q49_raw >= 4 and q53 >= 4:
        return _flag(
            3,
            name,
            "Claims to buy things without thinking (Q49) but also thinks carefully before purchases (Q53) "
            "- impossible combination",
            FlagSeverity.HIGH,
            ["q49", "q53"],
        )

    # q48/q49 are impulsivity items, reverse-coded onto the control scale
    sd = std_dev([6 - q48_raw, 6 - q49_raw, q52, q53])
    if sd > VARIANCE_THRESHOLD:
        return _flag(
            3,
            "Impulse Control Variance",
            f"High variance in impulse control responses (SD={sd:.2f})",
            FlagSeverity.MEDIUM,
            ["q48", "q49", "q52", "q53"],
        )
    return None


def check_goal_achievement(responses: Responses) -> Optional[ConsistencyFlag]:
    q13 = _numeric(responses, "q13")
    achieve_goals = "can achieve" in (_text(responses, "q57") or "")
    name = "Financial Goal Achievement Mismatch"

    if q13 >= 4 and not achieve_goals:
        return _flag(
            4,
            name,
            "Claims to achieve financial goals often/always (Q13) but believes goals don't work out (Q57)",
            FlagSeverity.HIGH,
            ["q13", "q57"],
        )
    if q13 <= 2 and achieve_goals:
        return _flag(
            4,
            name,
            "Claims to rarely achieve financial goals (Q13) but believes they can achieve goals (Q57)",
            FlagSeverity.MEDIUM,
            ["q13", "q57"],
        )
    return None


def check_emotional_stability(responses: Responses) -> Optional[ConsistencyFlag]:
    return _variance_check(
        responses, 5, "Emotional Stability Variance", "emotional stability", ["q22", "q23", "q24", "q25", "q26"]
    )


def check_locus_pattern(responses: Responses) -> Optional[ConsistencyFlag]:
    questions = ["q54", "q55", "q56", "q57", "q58"]
    internal_count = 0
    for question_id in questions:
        answer = _text(responses, question_id) or ""
        if any(keyword in answer for keyword in constants.LOCUS_INTERNAL_KEYWORDS):
            internal_count += 1

    if 2 <= internal_count <= 3:
        return _flag(
            6,
            "Locus of Control Mixed Pattern",
            f"Inconsistent locus of control pattern ({internal_count} internal out of 5) "
            "suggests confusion or random responding",
            FlagSeverity.MEDIUM,
            questions,
        )
    return None


def check_future_orientation(responses: Responses) -> Optional[ConsistencyFlag]:
    q60 = _text(responses, "q60")
    q61 = _numeric(responses, "q61")
    name = "Future Orientation Mismatch"

    if q60 == "Very often" and q61 <= 2:
        return _flag(
            7,
            name,
            "Thinks about future very often (Q60) but doesn't believe small decisions affect future (Q61=Never/Rarely)",
            FlagSeverity.HIGH,
            ["q60", "q61"],
        )
    if q60 == "Never" and q61 >= 4:
        return _flag(
            7,
            name,
            "Never thinks about future (Q60) but believes small decisions significantly affect future "
            "(Q61=Often/Always)",
            FlagSeverity.HIGH,
            ["q60", "q61"],
        )
    return None


def check_social_collateral(responses: Responses) -> Optional[ConsistencyFlag]:
    q59 = _text(responses, "q59")
    q16b = _numeric(responses, "q16b")
    name = "Social Collateral Mismatch"

    if q59 == "None" and q16b >= 4:
        return _flag(
            8,
            name,
            "Has no one to borrow from (Q59=None) but likely to borrow from family/friends (Q16b=Likely/Very likely)",
            FlagSeverity.HIGH,
            ["q59", "q16b"],
        )
    if q59 == "More than 10" and q16b <= 2:
        return _flag(
            8,
            name,
            "Has many people to borrow from (Q59=More than 10) but unlikely to borrow from family/friends "
            "(Q16b=Very unlikely/Unlikely)",
            FlagSeverity.MEDIUM,
            ["q59", "q16b"],
        )
    return None


def check_emergency_reliance(responses: Responses) -> Optional[ConsistencyFlag]:
    q15 = _text(responses, "q15")
    q14a = _numeric(responses, "q14a")
    name = "Emergency Savings vs Reliance Mismatch"

    if q15 == "None" and q14a >= 4:
        return _flag(
            9,
            name,
            "Has no emergency savings (Q15=None) but likely to rely on personal savings (Q14a=Likely/Very likely)",
            FlagSeverity.HIGH,
            ["q15", "q14a"],
        )
    if q15 == "More than 6 months" and q14a <= 2:
        return _flag(
            9,
            name,
            "Has significant emergency savings (Q15=More than 6 months) but unlikely to rely on savings "
            "(Q14a=Very unlikely/Unlikely)",
            FlagSeverity.MEDIUM,
            ["q15", "q14a"],
        )
    return None


def check_asset_selling_duplicate(responses: Responses) -> Optional[ConsistencyFlag]:
    difference = abs(_numeric(responses, "q14b") - _numeric(responses, "q16e"))
    if difference >= DUPLICATE_MEASURE_GAP:
        return _flag(
            10,
            "Asset Selling Duplicate Measure Mismatch",
            f"Responses to nearly identical questions differ by {difference} points (Q14b vs Q16e)",
            FlagSeverity.HIGH,
            ["q14b", "q16e"],
        )
    return None


def check_financial_discipline(responses: Responses) -> Optional[ConsistencyFlag]:
    return _variance_check(
        responses, 11, "Financial Discipline Variance", "financial discipline", ["q47", "q51", "q52", "q53"]
    )


def check_conscientiousness(responses: Responses) -> Optional[ConsistencyFlag]:
    return _variance_check(
        responses, 12, "Conscientiousness Variance", "conscientiousness", ["q17", "q18", "q19", "q20", "q21"]
    )


def check_agreeableness(responses: Responses) -> Optional[ConsistencyFlag]:
    return _variance_check(
        responses, 13, "Agreeableness Variance", "agreeableness", ["q27", "q28", "q29", "q30", "q31"]
    )


def check_budget_tracking(responses: Responses) -> Optional[ConsistencyFlag]:
    if _numeric(responses, "q11") == 5 and _numeric(responses, "q8") == 1:
        return _flag(
            14,
            "Budgeting and Tracking Mismatch",
            "Always follows a budget (Q11) but never tracks expenses (Q8) - cannot budget without tracking",
            FlagSeverity.HIGH,
            ["q11", "q8"],
        )
    return None


def check_openness(responses: Responses) -> Optional[ConsistencyFlag]:
    return _variance_check(
        responses, 15, "Openness to Experience Variance", "openness", ["q32", "q33", "q34", "q35", "q36"]
    )


def check_extraversion(responses: Responses) -> Optional[ConsistencyFlag]:
    return _variance_check(
        responses, 16, "Extraversion Variance", "extraversion", ["q37", "q38", "q39", "q40", "q41"]
    )


CONSISTENCY_CHECKS: tuple[Callable[[Responses], Optional[ConsistencyFlag]], ...] = (
    check_savings_behavior,
    check_bill_payment,
    check_impulse_control,
    check_goal_achievement,
    check_emotional_stability,
    check_locus_pattern,
    check_future_orientation,
    check_social_collateral,
    check_emergency_reliance,
    check_asset_selling_duplicate,
    check_financial_discipline,
    check_conscientiousness,
    check_agreeableness,
    check_budget_tracking,
    check_openness,
    check_extraversion,
)


# =============================================================================
# Aggregation
# =============================================================================


def classify_flag_count(count: int) -> tuple[SeverityLevel, Recommendation]:
    if count <= 2:
        return SeverityLevel.MINOR, Recommendation.PROCEED
    if count <= 5:
        return SeverityLevel.MODERATE, Recommendation.REVIEW
    return SeverityLevel.SEVERE, Recommendation.RETAKE


def validate_responses(responses: Responses) -> ValidationResult:
    """
    Run all consistency checks over one submission.

    Args:
        responses: question id -> answer string (not modified)

    Returns:
        ValidationResult with the raised flags, consistency score
        (100 - 7 per flag, floored at 0) and recommendation
    """
    flags = []
    for check in CONSISTENCY_CHECKS:
        flag = check(responses)
        if flag is not None:
            flags.append(flag)

    count = len(flags)
    severity_level, recommendation = classify_flag_count(count)

    if count:
        logger.debug(f"{count} consistency flag(s): {', '.join(f.check_id for f in flags)}")

    return ValidationResult(
        total_checks=len(CONSISTENCY_CHECKS),
        inconsistencies_detected=count,
        severity_level=severity_level,
        consistency_score=max(0, 100 - count * FLAG_PENALTY),
        flags=flags,
        recommendation=recommendation,
    )


def format_validation_report(result: ValidationResult) -> str:
    """Render a ValidationResult as a plain-text report."""
    lines = [
        "CONSISTENCY ANALYSIS REPORT",
        "---------------------------",
        f"Total Checks Performed: {result.total_checks}",
        f"Inconsistencies Detected: {result.inconsistencies_detected}",
        f"Severity Level: {result.severity_level.value}",
        f"Consistency Score: {result.consistency_score}/100",
        "",
    ]

    if result.flags:
        lines.append("FLAGS DETECTED:")
        lines.append("")
        for index, flag in enumerate(result.flags, start=1):
            lines.append(f"{index}. {flag.check_name}")
            lines.append(f"   Description: {flag.description}")
            lines.append(f"   Severity: {flag.severity.value}")
            lines.append(f"   Questions: {', '.join(flag.questions)}")
            lines.append("")

    lines.append(f"RECOMMENDATION: {result.recommendation.value}")
    if result.recommendation == Recommendation.REVIEW:
        lines.append("Moderate inconsistencies detected. Review flagged items before finalizing scores.")
    elif result.recommendation == Recommendation.RETAKE:
        lines.append(
            "Severe inconsistencies detected. Strong evidence of gaming, random responding, or invalid data. "
            "Consider invalidating assessment and recommend retake."
        )

    return "\n".join(lines) + "\n"
