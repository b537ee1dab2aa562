import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..schemas import RawRepository, ScoredRepository


class Weights(BaseModel):
    """Scoring weights, always scaled so they sum to 1."""

    model_config = ConfigDict(frozen=True)

    stars: float = Field(ge=0)
    forks: float = Field(ge=0)
    recency: float = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not all(k in data for k in ("stars", "forks", "recency")):
            return data
        stars, forks, recency = (float(data[k]) for k in ("stars", "forks", "recency"))
        if min(stars, forks, recency) < 0:
            raise ValueError("weights must be non-negative")
        total = stars + forks + recency
        if total <= 0:
            raise ValueError("at least one weight must be positive")
        return {**data, "stars": stars / total, "forks": forks / total, "recency": recency / total}

    @classmethod
    def normalized(cls, stars: float, forks: float, recency: float) -> "Weights":
        return cls(stars=stars, forks=forks, recency=recency)


def days_since(updated_at: datetime, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)
    # timestamps in the future count as updated today
    return max(0, (now - updated_at).days)


def recency_score(
    updated_at: Optional[datetime], half_life_days: float, now: Optional[datetime] = None
) -> float:
    """Exponential decay in (0, 1]; halves every ``half_life_days``."""
    if updated_at is None:
        return 0.0
    decay_rate = math.log(2.0) / half_life_days
    return math.exp(-decay_rate * days_since(updated_at, now))


def compute_score(
    repo: RawRepository, weights: Weights, half_life_days: float, now: Optional[datetime] = None
) -> float:
    stars_score = math.log1p(repo.stars)
    forks_score = math.log1p(repo.forks)
    recency = recency_score(repo.updated_at, half_life_days, now)
    total = weights.stars * stars_score + weights.forks * forks_score + weights.recency * recency
    return round(total, 6)


def score_repository(
    repo: RawRepository, weights: Weights, half_life_days: float, now: Optional[datetime] = None
) -> ScoredRepository:
    return ScoredRepository(
        **repo.model_dump(), score=compute_score(repo, weights, half_life_days, now)
    )
