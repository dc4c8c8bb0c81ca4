from fastapi import APIRouter, Depends
from datetime import datetime
from config import settings

from cache import ResultCache
from dependencies import get_cache_dependency
from models.common import HealthResponse

router = APIRouter(
    prefix="/health",
    tags=["health"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=HealthResponse)
async def health_check(cache: ResultCache = Depends(get_cache_dependency)):
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.APP_VERSION,
        "cache": cache.get_cache_info(),
        "config": {
            "cache_ttl": settings.CACHE_TTL,
            "max_workers": settings.MAX_WORKERS,
            "request_timeout": settings.REQUEST_TIMEOUT,
            "language_repo_limit": settings.LANGUAGE_REPO_LIMIT,
            "commit_repo_limit": settings.COMMIT_REPO_LIMIT,
            "authenticated": bool(settings.GITHUB_PAT)
        }
    }
