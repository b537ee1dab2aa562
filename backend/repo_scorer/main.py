from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .config import get_settings
from .datasources.github_adapter import GitHubAdapter
from .logger import setup_logging
from .schemas import ErrorResponse, RepoResponse
from .services.cache import InMemoryCache
from .services.scoring import Weights
from .services.scoring_service import ScoringService

settings = get_settings()
setup_logging(settings.log_level)


def build_scoring_service(adapter: GitHubAdapter) -> ScoringService:
    weights = Weights.normalized(
        settings.weight_stars, settings.weight_forks, settings.weight_recency
    )
    score_cache = InMemoryCache(
        settings.cache_ttl_seconds, settings.cache_max_size, name="score-cache"
    )
    return ScoringService(adapter, score_cache, weights, settings.recency_half_life_days)


@asynccontextmanager
async def lifespan(app: FastAPI):
    github = GitHubAdapter(settings)
    app.state.scoring_service = build_scoring_service(github)
    logger.info(
        f"[api] started with weights {app.state.scoring_service.weights.model_dump()}, "
        f"half-life {settings.recency_half_life_days} days, cache TTL {settings.cache_ttl_seconds}s"
    )
    yield
    await github.aclose()
    logger.info("[api] shut down")


app = FastAPI(title="Repo Scorer", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_scoring_service(request: Request) -> ScoringService:
    return request.app.state.scoring_service


def error_response(request: Request, status: int, message: str) -> JSONResponse:
    body = ErrorResponse(
        date=datetime.now(timezone.utc),
        status=status,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.warning(f"[api] invalid request parameter: {exc.errors()}")
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(request, 400, f"Invalid request parameter: {message}")


@app.exception_handler(ValueError)
async def handle_bad_request(request: Request, exc: ValueError):
    logger.warning(f"[api] bad request: {exc}")
    return error_response(request, 400, str(exc))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.opt(exception=exc).error("[api] unexpected error")
    return error_response(request, 500, f"Unexpected error: {exc}")


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/v1/repos", response_model=RepoResponse)
async def get_repo_scores(
    language: str = Query(..., description="Programming language filter"),
    since: date = Query(..., description="Fetch repositories created after this date (YYYY-MM-DD)"),
    extra_query: Optional[str] = Query(None, alias="q", description="Optional GitHub filter, e.g. topic:backend"),
    limit: int = Query(100, ge=1, description="Maximum number of repositories to return"),
    service: ScoringService = Depends(get_scoring_service),
):
    if not language.strip():
        raise ValueError("Language must not be blank")
    return await service.score_with_metadata(language, since, extra_query, limit)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
