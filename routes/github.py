from fastapi import APIRouter, Query, Depends
from fastapi.responses import JSONResponse
from typing import Optional, Tuple
import asyncio
import logging
import re

from config import settings
from dependencies import get_analytics_dependency, get_client_dependency
from exceptions import GitHubAnalyticsError, InvalidQueryError, UpstreamError
from github_analytics import GitHubAnalytics, VIEW_TYPES, WINDOWED_VIEWS
from github_client import GitHubClient
from models.common import ApiResponse, ErrorResponse

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9-]{1,39}$')

router = APIRouter(
    prefix="/api/github",
    tags=["github"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def parse_query(username: Optional[str], view: Optional[str], days: Optional[str]) -> Tuple[str, str, int]:
    username = (username or "").strip()
    if not username:
        raise InvalidQueryError("Username is required")
    if not USERNAME_PATTERN.match(username):
        raise InvalidQueryError("Invalid username")

    if not view:
        raise InvalidQueryError("Type parameter is required")
    if view not in VIEW_TYPES:
        raise InvalidQueryError("Invalid type parameter")

    if view not in WINDOWED_VIEWS or days is None or days == "":
        window = settings.DEFAULT_DAYS
    else:
        try:
            window = int(days)
        except ValueError:
            raise InvalidQueryError("Invalid days parameter")
        if window > settings.MAX_DAYS:
            raise InvalidQueryError(f"Days parameter must not exceed {settings.MAX_DAYS}")

    return username, view, window


def error_response(error: GitHubAnalyticsError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.public_message})


@router.get("", response_model=ApiResponse)
async def get_github_view(
        username: Optional[str] = Query(None, description="GitHub username"),
        type: Optional[str] = Query(None, description="View: user, repos, languages, commits, analytics or heatmap"),
        days: Optional[str] = Query(None, description="Trailing window in days for commits, analytics and heatmap"),
        service: GitHubAnalytics = Depends(get_analytics_dependency)
):
    try:
        username, view, window = parse_query(username, type, days)
        data, cached = await service.get_view(view, username, window)
    except InvalidQueryError as e:
        return error_response(e)
    except UpstreamError as e:
        logger.error(f"Upstream failure for {type} view of {username}: {e} (status: {e.status})")
        return error_response(e)
    except GitHubAnalyticsError as e:
        logger.warning(f"Request for {type} view of {username} failed: {e}")
        return error_response(e)
    except Exception as e:
        logger.error(f"GitHub endpoint error: {e}", exc_info=True)
        return error_response(GitHubAnalyticsError(str(e)))

    return {
        "data": data,
        "cached": cached,
        "rateLimit": service.rate_limit_summary()
    }


@router.get("/rate-limit")
async def get_rate_limit(client: GitHubClient = Depends(get_client_dependency)):
    try:
        loop = asyncio.get_running_loop()
        rate_limit = await loop.run_in_executor(client.executor, client.check_rate_limit)
    except GitHubAnalyticsError as e:
        logger.warning(f"Rate limit check failed: {e}")
        return error_response(e)

    return rate_limit.model_dump()
