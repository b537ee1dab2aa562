import asyncio
import math
from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from .base import DataSource
from ..config import Settings, get_settings
from ..schemas import RawRepository
from ..services.cache import InMemoryCache
from ..services.query import build_search_query, query_signature

# GitHub search returns at most 1000 results, i.e. 10 pages of 100
MAX_SEARCH_PAGES = 10


class GitHubSearchError(RuntimeError):
    pass


def _to_repository(item: Dict[str, Any]) -> RawRepository:
    return RawRepository(
        name=item.get("name") or "",
        full_name=item.get("full_name") or "",
        owner_login=(item.get("owner") or {}).get("login") or "",
        url=item.get("html_url"),
        language=item.get("language"),
        stars=item.get("stargazers_count") or 0,
        forks=item.get("forks_count") or 0,
        updated_at=item.get("updated_at"),
    )


class GitHubAdapter(DataSource):
    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[InMemoryCache] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.per_page = self.settings.github_per_page
        if cache is None:
            cache = InMemoryCache(
                self.settings.cache_ttl_seconds, self.settings.cache_max_size, name="repo-cache"
            )
        self.cache = cache
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repo-scorer",
        }
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token.strip()}"
            logger.debug("[github] client configured with token authentication")
        else:
            logger.warning("[github] no GITHUB_TOKEN provided, using unauthenticated access (rate-limited)")
        self.headers = headers
        if client is None:
            client_kwargs: Dict[str, Any] = {
                "base_url": str(self.settings.github_base_url),
                "timeout": self.settings.github_timeout_seconds,
            }
            if self.settings.github_proxy:
                client_kwargs["proxy"] = self.settings.github_proxy
            client = httpx.AsyncClient(**client_kwargs)
        self.client = client

    async def aclose(self) -> None:
        await self.client.aclose()

    async def fetch_page(self, query: str, page: int, per_page: int) -> Tuple[RawRepository, ...]:
        """Fetch one page of search results, most starred first."""
        params = {
            "q": query,
            "sort": "stars",
            "order": "desc",
            "per_page": per_page,
            "page": page,
        }
        try:
            resp = await self.client.get("/search/repositories", params=params, headers=self.headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = exc.response.text
            status = exc.response.status_code
            raise GitHubSearchError(f"GitHub {status}: {body}") from exc
        except httpx.RequestError as exc:
            raise GitHubSearchError(f"GitHub request error: {type(exc).__name__} {repr(exc)}") from exc

        try:
            data = resp.json()
            items = data.get("items") or []
            return tuple(_to_repository(item) for item in items)
        except (ValueError, TypeError, AttributeError) as exc:
            raise GitHubSearchError(f"GitHub response could not be parsed: {exc}") from exc

    async def _fetch_page_or_empty(self, query: str, page: int) -> Tuple[RawRepository, ...]:
        # RuntimeError covers GitHubSearchError and httpx refusing a closed client
        try:
            return await self.fetch_page(query, page, self.per_page)
        except (RuntimeError, httpx.HTTPError) as exc:
            logger.warning(f"[github] page {page} failed for query {query!r}, treating as empty: {exc}")
            return ()

    async def search(
        self, language: Optional[str], since: Optional[str], extra_query: Optional[str], limit: int
    ) -> Tuple[RawRepository, ...]:
        cache_key = query_signature(language, since, extra_query, limit)
        cached = self.cache.get(cache_key)
        if cached:
            logger.debug(f"[github] cache hit for query: {cache_key}")
            return cached

        logger.debug(f"[github] cache miss for query: {cache_key}, fetching from GitHub API")
        query = build_search_query(language, since, extra_query)
        pages = min(math.ceil(limit / self.per_page), MAX_SEARCH_PAGES)

        # gather keeps results in argument order regardless of completion order
        results: List[Tuple[RawRepository, ...]] = await asyncio.gather(
            *(self._fetch_page_or_empty(query, page) for page in range(1, pages + 1))
        )
        repos = tuple(repo for page_items in results for repo in page_items)[:limit]

        self.cache.set(cache_key, repos)
        logger.info(f"[github] fetched {len(repos)} repositories over {pages} page(s) for query {query!r}")
        return repos
