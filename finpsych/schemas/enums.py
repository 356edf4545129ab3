"""Enums shared by the scoring and validation results."""

from enum import Enum


class RiskBand(str, Enum):
    """Credit risk band from the country-normalized percentile.

    UNKNOWN when no 5Cs category had data (CWI is null).
    """

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"
    UNKNOWN = "UNKNOWN"


class FlagSeverity(str, Enum):
    """Severity of a single consistency flag."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class SeverityLevel(str, Enum):
    """Overall inconsistency tier for a submission."""

    MINOR = "MINOR"        # 0-2 flags
    MODERATE = "MODERATE"  # 3-5 flags
    SEVERE = "SEVERE"      # 6+ flags


class Recommendation(str, Enum):
    """Advisory action for a submission; never blocks scoring."""

    PROCEED = "PROCEED"
    REVIEW = "REVIEW"
    RETAKE = "RETAKE"


class GamingRiskLevel(str, Enum):
    """Ordinal response-quality risk derived from the consistency flag count.

    Thresholds:
    - 0 flags: MINIMAL
    - 1-2: LOW
    - 3-5: MODERATE
    - 6-8: HIGH
    - 9+: SEVERE
    """

    MINIMAL = "MINIMAL"
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    SEVERE = "SEVERE"

    @property
    def rank(self) -> int:
        """Ordinal position, MINIMAL=0 … SEVERE=4."""
        return list(GamingRiskLevel).index(self)

    def __lt__(self, other):
        if not isinstance(other, GamingRiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, GamingRiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, GamingRiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, GamingRiskLevel):
            return NotImplemented
        return self.rank >= other.rank


class DataReliabilityLevel(str, Enum):
    """How far the self-reported CWI can be trusted relative to the NCI."""

    HIGH = "HIGH"
    MODERATE_HIGH = "MODERATE_HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"
    VERY_LOW = "VERY_LOW"

    @property
    def label(self) -> str:
        """Display label, e.g. MODERATE-HIGH, VERY LOW."""
        return {"MODERATE_HIGH": "MODERATE-HIGH", "VERY_LOW": "VERY LOW"}.get(self.value, self.value)


class QuestionKind(str, Enum):
    """Scoring rule family for a question id. Classified once per question."""

    LIKERT = "likert"
    LOCUS = "locus"
    EMERGENCY = "emergency"
    SOCIAL_COLLATERAL = "social_collateral"
    CRISIS_RANKING = "crisis_ranking"
    COGNITIVE_REFLECTION = "cognitive_reflection"
    DELAY_DISCOUNTING = "delay_discounting"
    FINANCIAL_NUMERACY = "financial_numeracy"
    LOAN_CONSEQUENCE = "loan_consequence"
    GAMING_DETECTION = "gaming_detection"
