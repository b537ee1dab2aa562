from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RawRepository(BaseModel):
    """One repository as reported by the upstream search endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    full_name: str
    owner_login: str = ""
    url: Optional[str] = None
    language: Optional[str] = None
    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    updated_at: Optional[datetime] = None


class ScoredRepository(RawRepository):
    score: float


class RepoResponse(BaseModel):
    language: str
    since: str
    limit: int
    count: int  # actual number of repositories returned
    total: int  # count capped at the upstream search limit
    data: List[ScoredRepository]


class ErrorResponse(BaseModel):
    date: datetime
    status: int
    message: str
    path: str
