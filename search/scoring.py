# scoring.py - turns a classification and raw confidence into the 0-100 Found Score
import math
from typing import FrozenSet, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from config import settings
from search.models import AI_INVISIBLE, AMBIGUOUS, MACHINE_VERIFIED, SearchOutcome

DEFAULT_SPECIALIZED_TYPES = frozenset({
    "RealEstateAgent",
    "RealEstateListing",
    "HomeAndConstructionBusiness",
    "Residence",
})


class ScoringConfig(BaseModel):
    """Every tunable of the calibrated scoring policy in one place."""

    model_config = ConfigDict(frozen=True)

    calibration_ceiling: float = Field(default=600.0, gt=0, description="Raw score treated as gold-standard confidence")
    score_cap: float = Field(default=98.0, ge=0, le=100, description="Best a raw score alone can earn")
    niche_penalty: float = Field(default=0.6, ge=0, le=1, description="Multiplier when no specialized type matches")
    ambiguous_cap: float = Field(default=45.0, ge=0, le=100)
    verified_fallback: int = Field(default=70, ge=0, le=100, description="Used when upstream gives no raw score")
    ambiguous_fallback: int = Field(default=30, ge=0, le=100)
    high_threshold: int = Field(default=70, ge=0, le=100, description="Scores above this band as high")
    low_threshold: int = Field(default=50, ge=0, le=100, description="Scores below this band as low")
    specialized_types: FrozenSet[str] = DEFAULT_SPECIALIZED_TYPES

    @model_validator(mode="after")
    def check_bands_ordered(self):
        if self.low_threshold > self.high_threshold:
            raise ValueError("low_threshold must not exceed high_threshold")
        return self

    @classmethod
    def from_settings(cls) -> "ScoringConfig":
        return cls(
            calibration_ceiling=settings.SCORE_CALIBRATION_CEILING,
            specialized_types=frozenset(settings.SPECIALIZED_TYPES),
        )


DEFAULT_CONFIG = ScoringConfig()


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def display_score(
    status: str,
    result_score: Optional[float] = None,
    types: Iterable[str] = (),
    config: Optional[ScoringConfig] = None,
) -> int:
    """Derive the user-facing score for one classification.

    ai-invisible is always 0. Without a raw score the verified/ambiguous
    fallbacks apply. Otherwise the raw score is read against the calibration
    ceiling, capped below 100, penalised when none of the types is in the
    specialized set, and capped again for ambiguous entities.
    """
    cfg = config or DEFAULT_CONFIG
    if status == AI_INVISIBLE:
        return 0
    if status not in (MACHINE_VERIFIED, AMBIGUOUS):
        raise ValueError(f"cannot score status {status!r}")

    if result_score is None:
        score = cfg.verified_fallback if status == MACHINE_VERIFIED else cfg.ambiguous_fallback
    else:
        base = min(max(result_score, 0.0) / cfg.calibration_ceiling * 100, cfg.score_cap)
        if not any(t in cfg.specialized_types for t in types):
            base *= cfg.niche_penalty
        score = base

    if status == AMBIGUOUS:
        score = min(score, cfg.ambiguous_cap)

    return max(0, min(100, _round_half_up(score)))


def score_band(score: int, config: Optional[ScoringConfig] = None) -> str:
    cfg = config or DEFAULT_CONFIG
    if score > cfg.high_threshold:
        return "high"
    if score < cfg.low_threshold:
        return "low"
    return "medium"


def score_outcome(outcome: SearchOutcome, config: Optional[ScoringConfig] = None) -> int:
    if outcome.result is None:
        return display_score(outcome.status, config=config)
    return display_score(
        outcome.status,
        result_score=outcome.result.result_score,
        types=outcome.result.types,
        config=config,
    )
