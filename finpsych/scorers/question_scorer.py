"""
Question Scorer - maps one raw answer to a numeric point value.

Each question id is classified once into a QuestionKind, and scoring switches
on that kind through a dispatch table that must cover every kind (checked at
import time, so a new kind without a rule fails loudly instead of silently
falling through to Likert).

Rule families:
- LIKERT: frequency scale Never=1 .. Always=5 (likelihood scale accepted),
  unknown → 3, reverse-scored items → 6 - score
- LOCUS: 1 for one of the five internal statements, else 0
- EMERGENCY: months-of-savings table (q15), legacy source table (q14),
  likelihood scale otherwise
- SOCIAL_COLLATERAL: people-count table (q59), likelihood scale otherwise
- CRISIS_RANKING: position of "Contact lender" / "Skip payments" in q16
- COGNITIVE_REFLECTION / DELAY_DISCOUNTING / FINANCIAL_NUMERACY: 1 or 0
- LOAN_CONSEQUENCE: 0-3 points by option prefix
- GAMING_DETECTION: always 0

Every rule is total: malformed or unknown answers degrade to a default.
"""

import json
import logging
import re
from typing import Callable, Optional

from finpsych import constants
from finpsych.config import DEFAULT_CONFIG, ScoringConfig
from finpsych.schemas.enums import QuestionKind

logger = logging.getLogger(__name__)

_CONSTRUCT_KINDS = {
    "gaming_detection": QuestionKind.GAMING_DETECTION,
    "locus_of_control": QuestionKind.LOCUS,
    "emergency_preparedness": QuestionKind.EMERGENCY,
    "social_collateral": QuestionKind.SOCIAL_COLLATERAL,
    "cognitive_reflection": QuestionKind.COGNITIVE_REFLECTION,
    "delay_discounting": QuestionKind.DELAY_DISCOUNTING,
    "financial_numeracy": QuestionKind.FINANCIAL_NUMERACY,
    "loan_consequence_awareness": QuestionKind.LOAN_CONSEQUENCE,
}

_CURRENCY_NOISE = re.compile(rf"[{constants.CURRENCY_SYMBOLS},\s]")


def classify_question(question_id: str, config: ScoringConfig = DEFAULT_CONFIG) -> QuestionKind:
    """Classify a question id into its scoring rule family."""
    if question_id.startswith("gd"):
        return QuestionKind.GAMING_DETECTION
    if question_id == constants.CRISIS_RANKING_QUESTION:
        return QuestionKind.CRISIS_RANKING
    construct = config.construct_for(question_id)
    return _CONSTRUCT_KINDS.get(construct, QuestionKind.LIKERT)


# =============================================================================
# Rule families
# =============================================================================


def _ordinal(answer: str) -> Optional[int]:
    """Look up an answer on the frequency scale, then the likelihood scale."""
    value = constants.LIKERT_MAP.get(answer)
    if value is None:
        value = constants.LIKELIHOOD_MAP.get(answer)
    return value


def score_likert(answer: str, reverse: bool = False) -> float:
    """Score a frequency-scale answer (1-5), reversing negatively framed items."""
    score = _ordinal(answer.strip())
    if score is None:
        logger.warning(f"Unknown Likert value: {answer!r}, defaulting to {constants.LIKERT_DEFAULT}")
        score = constants.LIKERT_DEFAULT
    return float(6 - score) if reverse else float(score)


def score_locus(answer: str) -> float:
    """Binary locus of control: internal statement = 1, external = 0."""
    return 1.0 if answer.strip() in constants.LOCUS_INTERNAL_ANSWERS else 0.0


def score_emergency(question_id: str, answer: str, reverse: bool = False) -> float:
    answer = answer.strip()
    if question_id == constants.EMERGENCY_MONTHS_QUESTION:
        return float(constants.EMERGENCY_MONTHS_SCORES.get(answer, constants.EMERGENCY_MONTHS_DEFAULT))
    if question_id == constants.EMERGENCY_SOURCE_QUESTION:
        return float(constants.EMERGENCY_SOURCE_SCORES.get(answer, constants.EMERGENCY_SOURCE_DEFAULT))
    score = constants.LIKELIHOOD_MAP.get(answer, constants.LIKERT_DEFAULT)
    return float(6 - score) if reverse else float(score)


def score_social_collateral(question_id: str, answer: str) -> float:
    answer = answer.strip()
    if question_id == constants.SOCIAL_COUNT_QUESTION:
        return float(constants.SOCIAL_SUPPORT_SCORES.get(answer, constants.SOCIAL_SUPPORT_DEFAULT))
    return float(constants.LIKELIHOOD_MAP.get(answer, constants.LIKERT_DEFAULT))


def score_crisis_ranking(answer: str) -> float:
    """Score the crisis ranking: contacting the lender early and skipping payments late is better.

    score = 3 + 0.3 * (6 - pos("Contact lender")) + 0.2 * pos("Skip payments"),
    positions zero-based, clamped to [1, 5].
    """
    try:
        ranking = json.loads(answer)
    except (TypeError, ValueError):
        logger.debug(f"Malformed crisis ranking {answer!r}, defaulting to {constants.CRISIS_BASE_SCORE}")
        return constants.CRISIS_BASE_SCORE
    if not isinstance(ranking, list):
        return constants.CRISIS_BASE_SCORE

    score = constants.CRISIS_BASE_SCORE
    if constants.CRISIS_CONTACT_LENDER in ranking:
        position = ranking.index(constants.CRISIS_CONTACT_LENDER)
        score += (len(constants.CRISIS_RANKING_ITEMS) - position) * constants.CRISIS_CONTACT_WEIGHT
    if constants.CRISIS_SKIP_PAYMENTS in ranking:
        score += ranking.index(constants.CRISIS_SKIP_PAYMENTS) * constants.CRISIS_SKIP_WEIGHT

    return min(5.0, max(1.0, score))


def score_cognitive_reflection(answer: str) -> float:
    """Bat-and-ball item: only the reflective answer (50) scores."""
    cleaned = _CURRENCY_NOISE.sub("", answer)
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return 1.0 if value == constants.COGNITIVE_REFLECTION_CORRECT else 0.0


def score_delay_discounting(answer: str) -> float:
    """1 for the delayed (patient) option, 0 for the immediate one."""
    stripped = answer.strip()
    patient = any(marker in stripped for marker in constants.DELAY_DISCOUNTING_PATIENT_MARKERS)
    return 1.0 if patient else 0.0


def score_financial_numeracy(question_id: str, answer: str) -> float:
    answer = answer.strip()
    correct = constants.FINANCIAL_NUMERACY_CORRECT.get(question_id)
    if correct is None and question_id.startswith(constants.ASFN_PREFIX):
        correct = constants.ASFN_CORRECT_ANSWERS.get(question_id)
    return 1.0 if correct is not None and answer == correct else 0.0


def score_loan_consequence(question_id: str, answer: str, config: ScoringConfig = DEFAULT_CONFIG) -> float:
    """Points (0-3) keyed by the option prefix "A)".."D)"."""
    prefix = answer.strip()[:2].upper()
    points = config.lca_points.get(question_id, {})
    return float(points.get(prefix, 0))


# =============================================================================
# Dispatch
# =============================================================================

_Handler = Callable[[str, str, ScoringConfig], float]

_HANDLERS: dict[QuestionKind, _Handler] = {
    QuestionKind.LIKERT: lambda qid, answer, cfg: score_likert(answer, cfg.is_reverse_scored(qid)),
    QuestionKind.LOCUS: lambda qid, answer, cfg: score_locus(answer),
    QuestionKind.EMERGENCY: lambda qid, answer, cfg: score_emergency(qid, answer, cfg.is_reverse_scored(qid)),
    QuestionKind.SOCIAL_COLLATERAL: lambda qid, answer, cfg: score_social_collateral(qid, answer),
    QuestionKind.CRISIS_RANKING: lambda qid, answer, cfg: score_crisis_ranking(answer),
    QuestionKind.COGNITIVE_REFLECTION: lambda qid, answer, cfg: score_cognitive_reflection(answer),
    QuestionKind.DELAY_DISCOUNTING: lambda qid, answer, cfg: score_delay_discounting(answer),
    QuestionKind.FINANCIAL_NUMERACY: lambda qid, answer, cfg: score_financial_numeracy(qid, answer),
    QuestionKind.LOAN_CONSEQUENCE: score_loan_consequence,
    QuestionKind.GAMING_DETECTION: lambda qid, answer, cfg: 0.0,
}

_unhandled = set(QuestionKind) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No scoring rule for question kinds: {sorted(k.value for k in _unhandled)}")


def score_question(question_id: str, answer: str, config: ScoringConfig = DEFAULT_CONFIG) -> float:
    """Score a single answer according to its question kind."""
    kind = classify_question(question_id, config)
    return _HANDLERS[kind](question_id, answer, config)
