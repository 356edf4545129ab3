"""
Country normalization and risk classification.

Re-expresses the raw CWI against country calibration statistics, maps the
z-score onto 0-100 and a percentile, and looks up the risk band.
"""

import math
from typing import Optional

from finpsych import constants
from finpsych.config import DEFAULT_CONFIG, ScoringConfig
from finpsych.schemas.enums import RiskBand

# Abramowitz & Stegun 7.1.26
_AS_A1 = 0.254829592
_AS_A2 = -0.284496736
_AS_A3 = 1.421413741
_AS_A4 = -1.453152027
_AS_A5 = 1.061405429
_AS_P = 0.3275911


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with ties away from zero for non-negative input (2.25 -> 2.3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round1(value: float) -> float:
    return round_half_up(value, 1)


def normalize_by_country(
    cwi_raw: float, country: Optional[str], config: ScoringConfig = DEFAULT_CONFIG
) -> float:
    """Country z-score of the raw CWI. Unmapped countries use the "Other" bucket."""
    mean, std = config.country_calibration(country)
    return (cwi_raw - mean) / std


def convert_to_0_100(z_score: float) -> float:
    """Map z from [-3, +3] linearly onto [0, 100], clamped, one decimal."""
    span = constants.Z_SCORE_CEILING - constants.Z_SCORE_FLOOR
    scaled = (z_score - constants.Z_SCORE_FLOOR) / span * 100
    return max(0.0, min(100.0, round1(scaled)))


def z_score_to_percentile(z_score: float) -> float:
    """Standard normal CDF via the Abramowitz-Stegun erf approximation."""
    sign = -1.0 if z_score < 0 else 1.0
    x = abs(z_score) / math.sqrt(2)

    t = 1.0 / (1.0 + _AS_P * x)
    y = 1.0 - (((((_AS_A5 * t + _AS_A4) * t) + _AS_A3) * t + _AS_A2) * t + _AS_A1) * t * math.exp(-x * x)

    return max(0.0, min(1.0, 0.5 * (1.0 + sign * y)))


def assign_risk_band(percentile: Optional[float], config: ScoringConfig = DEFAULT_CONFIG) -> RiskBand:
    """First band whose threshold the percentile meets, scanning high to low."""
    if percentile is None:
        return RiskBand.UNKNOWN
    for band, min_percentile in config.risk_bands:
        if percentile >= min_percentile:
            return RiskBand(band)
    return RiskBand.VERY_HIGH
