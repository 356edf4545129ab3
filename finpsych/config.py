"""Calibration config: the read-only tables every scoring stage consumes.

The engine never reads files or environment variables. Stages take a
ScoringConfig argument (DEFAULT_CONFIG when omitted); alternate calibration
sets are loaded explicitly by callers from YAML and passed in.

Usage:
    from finpsych.config import DEFAULT_CONFIG, load_config

    config = load_config("config/calibration.yaml")
    result = calculate_cwi(responses, "Nigeria", config=config)

YAML layout (every key optional; omitted tables keep their defaults):

    version: "1.2.0-ke"
    five_c_weights: {character: 0.2, capacity: 0.2, ...}
    country_stats: {Kenya: {mean: 54.4, std: 13.35}, Other: {mean: 55, std: 15}}
    global_stats: {self_control: {mean: 3.28, std: 0.78}, ...}
    risk_bands: [{band: LOW, min_percentile: 0.75}, ...]
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

import yaml

from finpsych import constants
from finpsych.schemas.enums import RiskBand

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ScoringConfig:
    """Immutable calibration set for one model version."""

    model_version: str = constants.MODEL_VERSION
    question_construct_map: Mapping[str, str] = field(default_factory=lambda: constants.QUESTION_CONSTRUCT_MAP)
    reverse_scored_questions: frozenset = field(default_factory=lambda: constants.REVERSE_SCORED_QUESTIONS)
    global_stats: Mapping[str, tuple] = field(default_factory=lambda: constants.GLOBAL_STATS)
    pca_weights: Mapping[str, float] = field(default_factory=lambda: constants.PCA_WEIGHTS)
    five_c_map: Mapping[str, tuple] = field(default_factory=lambda: constants.FIVE_C_MAP)
    five_c_weights: Mapping[str, float] = field(default_factory=lambda: constants.FIVE_C_WEIGHTS)
    country_stats: Mapping[str, tuple] = field(default_factory=lambda: constants.COUNTRY_STATS)
    risk_bands: tuple = constants.RISK_BANDS
    lca_points: Mapping[str, Mapping[str, int]] = field(default_factory=lambda: constants.LCA_POINTS)
    lca_max_raw_score: int = constants.LCA_MAX_RAW_SCORE

    def construct_for(self, question_id: str) -> Optional[str]:
        return self.question_construct_map.get(question_id)

    def is_reverse_scored(self, question_id: str) -> bool:
        return question_id in self.reverse_scored_questions

    def population_stats(self, construct: str) -> tuple[float, float]:
        """(mean, std) for a construct, falling back to mean=3, std=1."""
        return self.global_stats.get(
            construct, (constants.DEFAULT_CONSTRUCT_MEAN, constants.DEFAULT_CONSTRUCT_STD)
        )

    def country_calibration(self, country: Optional[str]) -> tuple[float, float]:
        """(mean, std) for a country; unmapped countries use the "Other" bucket."""
        if country in self.country_stats:
            return self.country_stats[country]
        return self.country_stats[constants.FALLBACK_COUNTRY]


DEFAULT_CONFIG = ScoringConfig()


# Module-level cache, keyed by resolved path
_config_cache: dict[Path, ScoringConfig] = {}


def load_config(path: Union[str, Path], base: ScoringConfig = DEFAULT_CONFIG) -> ScoringConfig:
    """Load and cache a calibration override file.

    Tables present in the file replace the corresponding tables of ``base``.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a table is malformed (weights not summing to 1.0,
            non-positive std, missing "Other" country bucket, ...)
    """
    config_path = Path(path).expanduser().resolve()
    if config_path in _config_cache:
        return _config_cache[config_path]

    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Calibration file {config_path} must contain a mapping, got {type(raw).__name__}")

    config = build_config(raw, base=base)
    _config_cache[config_path] = config
    logger.info(
        f"Loaded calibration {config.model_version} from {config_path} "
        f"({len(config.country_stats)} countries, {len(config.global_stats)} constructs)"
    )
    return config


def build_config(raw: dict, base: ScoringConfig = DEFAULT_CONFIG) -> ScoringConfig:
    """Build a validated ScoringConfig from a parsed calibration mapping."""
    overrides = {}

    if "version" in raw:
        overrides["model_version"] = str(raw["version"])

    if "five_c_weights" in raw:
        weights = {k: float(v) for k, v in raw["five_c_weights"].items()}
        _validate_five_c_weights(weights)
        overrides["five_c_weights"] = MappingProxyType(weights)

    if "country_stats" in raw:
        stats = _parse_stats_table("country_stats", raw["country_stats"])
        if constants.FALLBACK_COUNTRY not in stats:
            raise ValueError(f"country_stats must define the '{constants.FALLBACK_COUNTRY}' fallback bucket")
        overrides["country_stats"] = MappingProxyType(stats)

    if "global_stats" in raw:
        overrides["global_stats"] = MappingProxyType(_parse_stats_table("global_stats", raw["global_stats"]))

    if "pca_weights" in raw:
        overrides["pca_weights"] = MappingProxyType({k: float(v) for k, v in raw["pca_weights"].items()})

    if "risk_bands" in raw:
        overrides["risk_bands"] = _parse_risk_bands(raw["risk_bands"])

    unknown = set(raw) - {"version", "five_c_weights", "country_stats", "global_stats", "pca_weights", "risk_bands"}
    if unknown:
        logger.warning(f"Ignoring unknown calibration keys: {sorted(unknown)}")

    if overrides and "model_version" not in overrides:
        logger.warning("Calibration overrides tables without a version; results keep the base model version")

    return replace(base, **overrides)


def _validate_five_c_weights(weights: dict[str, float]) -> None:
    """Validate that weights cover exactly the 5Cs and sum to 1.0."""
    missing = set(constants.FIVE_C_CATEGORIES) - set(weights)
    if missing:
        raise ValueError(f"five_c_weights missing categories: {sorted(missing)}")
    extra = set(weights) - set(constants.FIVE_C_CATEGORIES)
    if extra:
        raise ValueError(f"five_c_weights has unexpected categories: {sorted(extra)}")
    if any(w < 0 for w in weights.values()):
        raise ValueError("five_c_weights must be non-negative")
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ValueError(f"five_c_weights sum to {total}, expected 1.0")


def _parse_stats_table(name: str, table: dict) -> dict[str, tuple[float, float]]:
    parsed = {}
    for key, entry in table.items():
        try:
            mean = float(entry["mean"])
            std = float(entry["std"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"{name}.{key} must have numeric 'mean' and 'std': {e}") from e
        if std <= 0:
            raise ValueError(f"{name}.{key} std must be positive, got {std}")
        parsed[str(key)] = (mean, std)
    return parsed


def _parse_risk_bands(bands: list) -> tuple:
    parsed = []
    for entry in bands:
        try:
            parsed.append((str(entry["band"]), float(entry["min_percentile"])))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"risk_bands entries need 'band' and 'min_percentile': {e}") from e
    unknown_bands = {band for band, _ in parsed} - {b.value for b in RiskBand if b is not RiskBand.UNKNOWN}
    if unknown_bands:
        raise ValueError(f"risk_bands has unknown bands: {sorted(unknown_bands)}")
    thresholds = [threshold for _, threshold in parsed]
    if not parsed or thresholds != sorted(thresholds, reverse=True):
        raise ValueError("risk_bands must be a non-empty list in descending min_percentile order")
    if thresholds[-1] > 0:
        raise ValueError("the last risk band must have min_percentile 0 so every percentile maps to a band")
    return tuple(parsed)


def clear_cache():
    """Clear the calibration cache (useful for testing)."""
    _config_cache.clear()
