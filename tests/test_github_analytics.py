"""Tests for the view entry points: caching, composition and error propagation."""

import json
from datetime import timedelta

import pytest

from cache import ResultCache
from exceptions import NotFound, UpstreamError
from fanout import FanoutCoordinator
from github_analytics import GitHubAnalytics
from conftest import NOW, make_commit, make_repo


@pytest.fixture
def repos():
    return [
        make_repo("web", pushed_at=NOW, stargazers_count=10, forks_count=2),
        make_repo("api", pushed_at=NOW - timedelta(days=1), stargazers_count=5, forks_count=1),
    ]


@pytest.fixture
def service(mock_client, repos):
    mock_client.fetch_repositories.return_value = repos
    mock_client.fetch_languages.side_effect = lambda owner, repo: {
        "web": {"TypeScript": 800, "CSS": 200},
        "api": {"TypeScript": 200},
    }[repo]
    mock_client.fetch_commits.side_effect = lambda owner, repo, since: {
        "web": [make_commit("web", NOW - timedelta(days=2), sha=str(i)) for i in range(3)],
        "api": [make_commit("api", NOW, sha="x")],
    }[repo]

    return GitHubAnalytics(
        mock_client,
        ResultCache(ttl=3600),
        FanoutCoordinator(mock_client),
        default_days=3,
        clock=lambda: NOW,
    )


def upstream_calls(client) -> int:
    return sum(
        method.call_count
        for method in (client.fetch_user, client.fetch_repositories, client.fetch_languages, client.fetch_commits)
    )


@pytest.mark.asyncio
async def test_second_call_is_served_from_cache(service, mock_client):
    first, first_cached = await service.get_analytics("octocat")
    calls_after_first = upstream_calls(mock_client)

    second, second_cached = await service.get_analytics("octocat")

    assert first_cached is False
    assert second_cached is True
    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)
    assert upstream_calls(mock_client) == calls_after_first


@pytest.mark.asyncio
async def test_cache_key_includes_window(service, mock_client):
    await service.get_commits("octocat", 3)
    _, cached = await service.get_commits("octocat", 7)

    assert cached is False
    assert mock_client.fetch_repositories.call_count == 2


@pytest.mark.asyncio
async def test_analytics_payload(service):
    data, _ = await service.get_analytics("octocat")

    assert data["user"]["login"] == "octocat"
    assert [repo["name"] for repo in data["repos"]] == ["web", "api"]
    assert data["languages"][0]["name"] == "TypeScript"
    assert data["languages"][0]["bytes"] == 1000
    assert data["commits"]["total"] == 4
    assert [bucket["commits"] for bucket in data["commits"]["timeseries"]] == [3, 0, 1]
    assert data["commits"]["byRepo"][0] == {"name": "web", "commits": 3, "url": "https://github.com/octocat/web"}
    assert data["stats"] == {
        "totalStars": 15,
        "totalForks": 3,
        "totalRepos": 2,
        "totalCommits": 4,
        "topLanguage": "TypeScript",
        "mostActiveRepo": "web",
    }
    assert data["insights"] == [
        "Most used language: TypeScript",
        "Most active repository: web",
        "Peak activity day: Jan 1 with 3 commits",
        "Average commits per day: 1.3",
    ]


@pytest.mark.asyncio
async def test_languages_view(service):
    data, cached = await service.get_languages("octocat")

    assert cached is False
    assert data["totalRepos"] == 2
    assert [(d["name"], d["repos"]) for d in data["languages"]] == [("TypeScript", 2), ("CSS", 1)]


@pytest.mark.asyncio
async def test_commits_view(service):
    data, _ = await service.get_commits("octocat")

    assert set(data) == {"timeseries", "byRepo", "totalCommits"}
    assert data["totalCommits"] == 4
    assert data["timeseries"][0] == {"date": "Jan 1", "isoDate": "2024-01-01", "commits": 3,
                                     "timestamp": 1704067200000}


@pytest.mark.asyncio
async def test_heatmap_view(service):
    data, _ = await service.get_view("heatmap", "octocat", 3)

    assert len(data["heatmap"]) == 3
    assert data["totalCommits"] == 4


@pytest.mark.asyncio
async def test_zero_day_window_skips_commit_fanout(service, mock_client):
    data, _ = await service.get_commits("octocat", 0)

    assert data == {"timeseries": [], "byRepo": [], "totalCommits": 0}
    mock_client.fetch_commits.assert_not_called()


@pytest.mark.asyncio
async def test_partial_language_failure_still_succeeds(service, mock_client):
    def fetch_languages(owner, repo):
        if repo == "api":
            raise UpstreamError("boom", status=500)
        return {"Go": 10}

    mock_client.fetch_languages.side_effect = fetch_languages

    data, _ = await service.get_languages("octocat")

    assert data["languages"] == [
        {"name": "Go", "bytes": 10, "repos": 1, "percentage": 100.0, "color": "#00add8"}
    ]


@pytest.mark.asyncio
async def test_unknown_user_propagates_and_is_not_cached(service, mock_client):
    mock_client.fetch_user.side_effect = NotFound("ghost")

    with pytest.raises(NotFound):
        await service.get_analytics("ghost")

    assert len(service.cache) == 0


@pytest.mark.asyncio
async def test_repository_list_failure_is_fatal(service, mock_client):
    mock_client.fetch_repositories.side_effect = UpstreamError("down", status=503)

    with pytest.raises(UpstreamError):
        await service.get_languages("octocat")


@pytest.mark.asyncio
async def test_unknown_view(service):
    with pytest.raises(ValueError):
        await service.get_view("followers", "octocat")


def test_rate_limit_summary(service):
    assert service.rate_limit_summary() == {"remaining": 4999, "reset": 1704300000}
