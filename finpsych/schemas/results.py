"""Pydantic result records produced by the scoring engine and the validator.

Every record is a frozen model: fields cannot be reassigned, though dict
fields are plain dicts. Each carries everything a caller needs to persist it
(``model_dump()``); the engine itself has no awareness of storage.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finpsych.schemas.enums import (
    FlagSeverity,
    GamingRiskLevel,
    Recommendation,
    RiskBand,
    SeverityLevel,
)


class FiveCScores(BaseModel):
    """Scores for the five credit categories on a 0-100 scale.

    None means no underlying construct had data. It is never the midpoint.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    character: Optional[float] = Field(default=None, ge=0, le=100)
    capacity: Optional[float] = Field(default=None, ge=0, le=100)
    capital: Optional[float] = Field(default=None, ge=0, le=100)
    collateral: Optional[float] = Field(default=None, ge=0, le=100)
    conditions: Optional[float] = Field(default=None, ge=0, le=100)

    def present(self) -> dict[str, float]:
        """Categories that have data."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class ScoringResult(BaseModel):
    """Full CWI scoring output for one submission.

    Fields are frozen; the construct dicts are copies owned by the record.
    """

    model_config = ConfigDict(frozen=True)

    # Construct level
    construct_scores: dict[str, float] = Field(default_factory=dict)
    construct_z_scores: dict[str, float] = Field(default_factory=dict)

    # 5Cs
    five_c_scores: FiveCScores = Field(default_factory=FiveCScores)

    # Final CWI (all None when no category had data)
    cwi_raw: Optional[float] = None
    cwi_normalized: Optional[float] = None
    cwi_0_100: Optional[float] = Field(default=None, ge=0, le=100)

    # Risk
    risk_band: RiskBand = RiskBand.UNKNOWN
    risk_percentile: Optional[float] = Field(default=None, ge=0, le=1)

    # Neurocognitive side channel, not folded into CWI
    nci_score: Optional[float] = Field(default=None, ge=0, le=100)

    # Metadata; scored_at is not part of the scored value
    model_version: str
    country: str
    scored_at: str

    def scored_values(self) -> dict:
        """Dump without the timestamp, for equality and regression checks."""
        return self.model_dump(exclude={"scored_at"})


class ConsistencyFlag(BaseModel):
    """One raised plausibility violation."""

    model_config = ConfigDict(frozen=True)

    check_id: str = Field(description="e.g. CHECK_3")
    check_name: str
    description: str
    severity: FlagSeverity
    questions: list[str] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Outcome of running all consistency checks over one submission."""

    model_config = ConfigDict(frozen=True)

    total_checks: int
    inconsistencies_detected: int = Field(ge=0)
    severity_level: SeverityLevel
    consistency_score: int = Field(ge=0, le=100)
    flags: list[ConsistencyFlag] = Field(default_factory=list)
    recommendation: Recommendation


class QualityBadge(BaseModel):
    """User-facing label and colors for a gaming risk level."""

    model_config = ConfigDict(frozen=True)

    level: GamingRiskLevel
    label: str
    bg_color: str = Field(description="Tailwind background class")
    text_color: str = Field(description="Tailwind text class")
    bg_color_hex: str
    text_color_hex: str
