from datetime import date
from typing import Optional, Tuple

from loguru import logger

from .cache import InMemoryCache
from .query import query_signature
from .scoring import Weights, score_repository
from ..datasources.base import DataSource
from ..schemas import RepoResponse, ScoredRepository

# GitHub search never reports more than this many results
GITHUB_RESULT_CAP = 1000


class ScoringService:
    """Fetches repositories from a data source, scores them and caches the ranking.

    Results are cached per query signature; a cache hit returns the very tuple
    that was stored, so repeated calls within the TTL are identity-equal.
    """

    def __init__(
        self,
        source: DataSource,
        cache: InMemoryCache,
        weights: Weights,
        half_life_days: float,
    ):
        if half_life_days <= 0:
            raise ValueError("half_life_days must be positive")
        self.source = source
        self.cache = cache
        self.weights = weights
        self.half_life_days = half_life_days

    async def score(
        self, language: str, since: str, extra_query: Optional[str], limit: int
    ) -> Tuple[ScoredRepository, ...]:
        cache_key = query_signature(language, since, extra_query, limit)
        cached = self.cache.get(cache_key)
        if cached is not None:
            self.cache.log_stats(f"cache hit for key {cache_key}")
            return cached

        repos = await self.source.search(language, since, extra_query, limit)
        scored = [
            score_repository(repo, self.weights, self.half_life_days)
            for repo in repos
            if repo is not None
        ]
        # sorted() is stable with reverse=True, so equal scores keep fetch order
        ranked = tuple(sorted(scored, key=lambda r: r.score, reverse=True))

        self.cache.set(cache_key, ranked)
        self.cache.log_stats(f"cache updated for key {cache_key}")
        logger.info(f"[scoring] scored {len(ranked)} repositories for {cache_key}")
        return ranked

    async def score_with_metadata(
        self, language: str, since: date, extra_query: Optional[str], limit: int
    ) -> RepoResponse:
        since_str = f"{since.isoformat()}T00:00Z"
        data = await self.score(language, since_str, extra_query, limit)
        return RepoResponse(
            language=language,
            since=since_str,
            limit=limit,
            count=len(data),
            total=min(len(data), GITHUB_RESULT_CAP),
            data=data,
        )
