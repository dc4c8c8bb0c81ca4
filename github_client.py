from datetime import datetime, timezone
from typing import Optional, List, Dict
import logging

from pydantic import ValidationError

from base_client import BaseClient
from config import settings
from exceptions import NotFound, UpstreamError
from models.github import UserProfile, Repository, CommitRecord, RateLimitInfo

logger = logging.getLogger(__name__)

# Upstream returns 409 for a repository with no commits.
EMPTY_REPOSITORY_STATUS = 409


class GitHubClient(BaseClient):
    PER_PAGE = 100

    def __init__(self,
                 token: Optional[str] = None,
                 base_url: str = None,
                 max_workers: int = None,
                 request_timeout: int = None,
                 max_repositories: int = None,
                 max_commits: int = None):

        super().__init__(
            base_url=base_url or settings.GITHUB_API_BASE,
            token=token,
            max_workers=max_workers,
            request_timeout=request_timeout
        )

        self.max_repositories = max_repositories or settings.MAX_REPOSITORIES
        self.max_commits = max_commits or settings.MAX_COMMITS_PER_REPO

    def fetch_user(self, username: str) -> UserProfile:
        raw = self._get_json(f"/users/{username}")
        try:
            return UserProfile.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Unexpected user payload for {username}: {e}")
            raise UpstreamError(f"Malformed user payload for {username}") from e

    def fetch_repositories(self, username: str) -> List[Repository]:
        repos: List[Repository] = []
        page = 1

        while len(repos) < self.max_repositories:
            batch = self._get_json(f"/users/{username}/repos", params={
                'per_page': self.PER_PAGE,
                'page': page,
                'sort': 'pushed',
                'direction': 'desc',
                'type': 'owner',
            })
            if not isinstance(batch, list):
                raise UpstreamError(f"Malformed repository list for {username}")

            try:
                repos.extend(Repository.model_validate(item) for item in batch)
            except ValidationError as e:
                logger.error(f"Unexpected repository payload for {username}: {e}")
                raise UpstreamError(f"Malformed repository payload for {username}") from e

            if len(batch) < self.PER_PAGE:
                break
            page += 1

        return repos[:self.max_repositories]

    def fetch_languages(self, owner: str, repo: str) -> Dict[str, int]:
        raw = self._get_json(f"/repos/{owner}/{repo}/languages")
        if not isinstance(raw, dict):
            raise UpstreamError(f"Malformed languages payload for {owner}/{repo}")

        languages = {}
        for name, size in raw.items():
            if not isinstance(size, int) or isinstance(size, bool) or size < 0:
                raise UpstreamError(f"Invalid byte count for {name} in {owner}/{repo}")
            languages[name] = size
        return languages

    def fetch_commits(self, owner: str, repo: str, since: Optional[datetime] = None) -> List[CommitRecord]:
        commits: List[CommitRecord] = []
        page = 1
        params = {'per_page': self.PER_PAGE}
        if since is not None:
            params['since'] = since.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')

        while len(commits) < self.max_commits:
            try:
                batch = self._get_json(f"/repos/{owner}/{repo}/commits", params={**params, 'page': page})
            except NotFound:
                break
            except UpstreamError as e:
                if e.status == EMPTY_REPOSITORY_STATUS:
                    break
                raise

            if not isinstance(batch, list):
                raise UpstreamError(f"Malformed commit list for {owner}/{repo}")

            for item in batch:
                try:
                    commits.append(CommitRecord.from_api(item, repo))
                except (ValidationError, TypeError) as e:
                    logger.warning(f"Skipping malformed commit in {owner}/{repo}: {e}")

            if len(batch) < self.PER_PAGE:
                break
            page += 1

        return commits[:self.max_commits]

    def check_rate_limit(self) -> RateLimitInfo:
        raw = self._get_json("/rate_limit")
        rate = (raw or {}).get('rate') or {}
        return RateLimitInfo(
            limit=rate.get('limit'),
            remaining=rate.get('remaining'),
            reset=rate.get('reset'),
        )
