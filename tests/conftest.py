"""Shared fixtures for the analytics test suite."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import Mock

import pytest

from github_client import GitHubClient
from models.github import CommitRecord, RateLimitInfo, Repository, UserProfile

NOW = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)


def make_repo(name: str, pushed_at: Optional[datetime] = None, owner: str = "octocat", **extra) -> Repository:
    pushed_at = pushed_at or NOW
    data = {
        "id": abs(hash(name)) % 100000,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner, "avatar_url": ""},
        "html_url": f"https://github.com/{owner}/{name}",
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": pushed_at.isoformat(),
        "pushed_at": pushed_at.isoformat(),
        "stargazers_count": 0,
        "forks_count": 0,
    }
    data.update(extra)
    return Repository.model_validate(data)


def make_commit(repo: str, when: datetime, sha: str = "abc123") -> CommitRecord:
    return CommitRecord(sha=sha, repository=repo, author_date=when)


def make_user(login: str = "octocat") -> UserProfile:
    return UserProfile.model_validate({
        "login": login,
        "id": 1,
        "avatar_url": "https://avatars.githubusercontent.com/u/1",
        "name": "The Octocat",
        "public_repos": 2,
        "followers": 10,
        "following": 0,
        "created_at": "2011-01-25T18:44:36Z",
        "updated_at": "2024-01-01T00:00:00Z",
    })


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def mock_client(executor):
    """A GitHubClient stand-in whose fetch methods are plain mocks."""
    client = Mock(spec=GitHubClient)
    client.executor = executor
    client.rate_limit = RateLimitInfo(limit=5000, remaining=4999, reset=1704300000)
    client.fetch_user.return_value = make_user()
    client.fetch_repositories.return_value = []
    client.fetch_languages.return_value = {}
    client.fetch_commits.return_value = []
    return client


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def day():
    return timedelta(days=1)
