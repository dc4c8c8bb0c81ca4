import asyncio
import logging
from concurrent.futures import Executor
from datetime import datetime
from functools import partial
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from config import settings
from github_client import GitHubClient
from models.github import CommitRecord, Repository

logger = logging.getLogger(__name__)


class FanoutResult(NamedTuple):
    repo: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FanoutCoordinator:
    """Issues one upstream call per repository and keeps only the successes.

    Calls run concurrently on the client's thread pool, so the pool size bounds
    how many are in flight. A failing repository is logged and left out of the
    result; it never cancels its siblings.
    """

    def __init__(self,
                 client: GitHubClient,
                 executor: Executor = None,
                 language_repo_limit: int = None,
                 commit_repo_limit: int = None):
        self.client = client
        self.executor = executor or client.executor
        self.language_repo_limit = language_repo_limit or settings.LANGUAGE_REPO_LIMIT
        self.commit_repo_limit = commit_repo_limit or settings.COMMIT_REPO_LIMIT

    async def _run(self, repo: str, fn: Callable[[], Any]) -> FanoutResult:
        loop = asyncio.get_running_loop()
        try:
            value = await loop.run_in_executor(self.executor, fn)
        except Exception as e:
            return FanoutResult(repo, error=e)
        return FanoutResult(repo, value=value)

    async def _gather(self, kind: str, calls: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
        results: List[FanoutResult] = await asyncio.gather(
            *(self._run(repo, fn) for repo, fn in calls.items())
        )

        collected = {}
        failed = 0
        for result in results:
            if result.ok:
                collected[result.repo] = result.value
            else:
                failed += 1
                logger.warning(f"Failed to fetch {kind} for {result.repo}: {result.error}")

        if failed:
            logger.info(f"{kind.capitalize()} fan-out completed: {len(collected)}/{len(results)} repositories, {failed} failed")
        return collected

    async def fetch_languages(self, owner: str, repos: Sequence[Repository]) -> Dict[str, Dict[str, int]]:
        selected = list(repos)[:self.language_repo_limit]
        calls = {
            repo.name: partial(self.client.fetch_languages, owner, repo.name)
            for repo in selected
        }
        return await self._gather("languages", calls)

    async def fetch_commits(self,
                            owner: str,
                            repos: Sequence[Repository],
                            since: Optional[datetime] = None) -> Dict[str, List[CommitRecord]]:
        selected = sorted(repos, key=lambda r: r.last_activity, reverse=True)[:self.commit_repo_limit]
        calls = {
            repo.name: partial(self.client.fetch_commits, owner, repo.name, since)
            for repo in selected
        }
        return await self._gather("commits", calls)
