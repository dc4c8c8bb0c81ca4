from functools import lru_cache
from cache import ResultCache
from config import settings
from fanout import FanoutCoordinator
from github_analytics import GitHubAnalytics
from github_client import GitHubClient


@lru_cache()
def get_client() -> GitHubClient:
    return GitHubClient(
        token=settings.GITHUB_PAT,
        base_url=settings.GITHUB_API_BASE,
        max_workers=settings.MAX_WORKERS,
        request_timeout=settings.REQUEST_TIMEOUT,
        max_repositories=settings.MAX_REPOSITORIES,
        max_commits=settings.MAX_COMMITS_PER_REPO
    )


@lru_cache()
def get_cache() -> ResultCache:
    return ResultCache(ttl=settings.CACHE_TTL)


@lru_cache()
def get_analytics() -> GitHubAnalytics:
    client = get_client()
    fanout = FanoutCoordinator(
        client,
        language_repo_limit=settings.LANGUAGE_REPO_LIMIT,
        commit_repo_limit=settings.COMMIT_REPO_LIMIT
    )
    return GitHubAnalytics(client, get_cache(), fanout, default_days=settings.DEFAULT_DAYS)


def get_client_dependency() -> GitHubClient:
    return get_client()


def get_cache_dependency() -> ResultCache:
    return get_cache()


def get_analytics_dependency() -> GitHubAnalytics:
    return get_analytics()
