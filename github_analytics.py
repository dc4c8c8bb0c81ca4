import asyncio
import logging
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

import analytics
from cache import ResultCache, make_key
from config import settings
from fanout import FanoutCoordinator
from github_client import GitHubClient
from models.analytics import (
    AnalyticsCommits,
    AnalyticsView,
    CommitsView,
    HeatmapView,
    LanguagesView,
)
from models.github import Repository

logger = logging.getLogger(__name__)

ANALYTICS_REPO_PREVIEW = 20

VIEW_TYPES = ("user", "repos", "languages", "commits", "analytics", "heatmap")
WINDOWED_VIEWS = ("commits", "analytics", "heatmap")

ViewResult = Tuple[Any, bool]


def dump(model) -> Any:
    return model.model_dump(mode="json", by_alias=True)


class GitHubAnalytics:
    """View entry points over the GitHub client.

    Every view returns ``(payload, cached)`` where ``payload`` is the
    JSON-ready body and ``cached`` tells whether it came from the result cache.
    Failures fetching the user or the repository list propagate; per-repository
    failures are absorbed by the fan-out coordinator.
    """

    def __init__(self,
                 client: GitHubClient,
                 cache: ResultCache,
                 fanout: FanoutCoordinator = None,
                 default_days: int = None,
                 clock: Callable[[], datetime] = None):
        self.client = client
        self.cache = cache
        self.fanout = fanout or FanoutCoordinator(client)
        self.default_days = default_days if default_days is not None else settings.DEFAULT_DAYS
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def _call(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.client.executor, partial(fn, *args))

    async def _cached(self, key: str, build) -> ViewResult:
        payload = self.cache.get(key)
        if payload is not None:
            return payload, True

        payload = await build()
        self.cache.put(key, payload)
        return payload, False

    def _since(self, days: int, now: datetime) -> Optional[datetime]:
        if days <= 0:
            return None
        window_start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        return window_start - timedelta(days=days - 1)

    async def _languages(self, username: str, repos: List[Repository]) -> LanguagesView:
        languages_by_repo = await self.fanout.fetch_languages(username, repos)
        return LanguagesView(
            languages=analytics.aggregate_languages(repos, languages_by_repo),
            total_repos=len(repos),
        )

    async def _commits(self, username: str, repos: List[Repository], days: int) -> CommitsView:
        now = self._clock()
        since = self._since(days, now)
        if since is None:
            commits_by_repo = {}
        else:
            commits_by_repo = await self.fanout.fetch_commits(username, repos, since)

        timeseries = analytics.build_commit_timeseries(
            analytics.flatten_commit_dates(commits_by_repo), days, now
        )
        return CommitsView(
            timeseries=timeseries,
            by_repo=analytics.rank_repo_commits(repos, commits_by_repo, days, now),
            total_commits=analytics.total_commits(timeseries),
        )

    async def get_user(self, username: str) -> ViewResult:
        async def build():
            return dump(await self._call(self.client.fetch_user, username))

        return await self._cached(make_key(username, "user"), build)

    async def get_repos(self, username: str) -> ViewResult:
        async def build():
            repos = await self._call(self.client.fetch_repositories, username)
            return [dump(repo) for repo in repos]

        return await self._cached(make_key(username, "repos"), build)

    async def get_languages(self, username: str) -> ViewResult:
        async def build():
            repos = await self._call(self.client.fetch_repositories, username)
            return dump(await self._languages(username, repos))

        return await self._cached(make_key(username, "languages"), build)

    async def get_commits(self, username: str, days: int = None) -> ViewResult:
        days = self.default_days if days is None else days

        async def build():
            repos = await self._call(self.client.fetch_repositories, username)
            return dump(await self._commits(username, repos, days))

        return await self._cached(make_key(username, "commits", days), build)

    async def get_heatmap(self, username: str, days: int = None) -> ViewResult:
        days = self.default_days if days is None else days

        async def build():
            repos = await self._call(self.client.fetch_repositories, username)
            commits = await self._commits(username, repos, days)
            return dump(HeatmapView(
                heatmap=analytics.build_heatmap(commits.timeseries),
                total_commits=commits.total_commits,
            ))

        return await self._cached(make_key(username, "heatmap", days), build)

    async def get_analytics(self, username: str, days: int = None) -> ViewResult:
        days = self.default_days if days is None else days

        async def build():
            user, repos = await asyncio.gather(
                self._call(self.client.fetch_user, username),
                self._call(self.client.fetch_repositories, username),
            )
            languages, commits = await asyncio.gather(
                self._languages(username, repos),
                self._commits(username, repos, days),
            )

            stats = analytics.calculate_user_stats(
                repos, languages.languages, commits.timeseries, commits.by_repo
            )
            view = AnalyticsView(
                user=user,
                repos=repos[:ANALYTICS_REPO_PREVIEW],
                languages=languages.languages,
                commits=AnalyticsCommits(
                    timeseries=commits.timeseries,
                    by_repo=commits.by_repo,
                    total=commits.total_commits,
                ),
                stats=stats,
                insights=analytics.generate_insights(stats, commits.timeseries),
            )
            logger.info(f"Built analytics for {username}: {len(repos)} repositories, {commits.total_commits} commits in {days} days")
            return dump(view)

        return await self._cached(make_key(username, "analytics", days), build)

    async def get_view(self, view: str, username: str, days: int = None) -> ViewResult:
        if view in WINDOWED_VIEWS:
            return await getattr(self, f"get_{view}")(username, days)
        if view in VIEW_TYPES:
            return await getattr(self, f"get_{view}")(username)
        raise ValueError(f"Unknown view: {view}")

    def rate_limit_summary(self) -> Dict[str, Optional[int]]:
        return {
            "remaining": self.client.rate_limit.remaining,
            "reset": self.client.rate_limit.reset,
        }
