import json
import logging
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from models.analytics import (
    CommitBucket,
    HeatmapCell,
    LanguageDatum,
    RepoCommitRank,
    UserStats,
)
from models.github import CommitRecord, Repository

logger = logging.getLogger(__name__)

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193

DEFAULT_DAYS = 90
TOP_REPOSITORIES = 10


@lru_cache(maxsize=1)
def load_language_colors() -> Dict[str, str]:
    colors_file = Path(__file__).parent / "data" / "language_colors.json"
    try:
        with open(colors_file, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load language colors from {colors_file}: {e}")
        return {}


def language_color(name: str) -> str:
    """Color for a language: the preset one if known, else derived from the name.

    The fallback is a 32-bit FNV-1a hash of the UTF-8 name folded into RGB,
    so it is identical across processes and platforms.
    """
    preset = load_language_colors().get(name)
    if preset:
        return preset

    h = FNV_OFFSET_BASIS
    for byte in name.encode('utf-8'):
        h ^= byte
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return f"#{h & 0xFFFFFF:06x}"


def aggregate_languages(repos: Sequence[Repository],
                        languages_by_repo: Mapping[str, Mapping[str, int]]) -> List[LanguageDatum]:
    totals: Dict[str, int] = {}
    contributors: Dict[str, set] = {}

    for repo in repos:
        repo_languages = languages_by_repo.get(repo.name)
        if not repo_languages:
            continue
        for language, size in repo_languages.items():
            totals[language] = totals.get(language, 0) + size
            contributors.setdefault(language, set()).add(repo.name)

    grand_total = sum(totals.values())

    languages = [
        LanguageDatum(
            name=language,
            bytes=size,
            repos=len(contributors[language]),
            percentage=(size / grand_total) * 100 if grand_total > 0 else 0.0,
            color=language_color(language),
        )
        for language, size in totals.items()
    ]
    return sorted(languages, key=lambda datum: datum.bytes, reverse=True)


def _today(now: Optional[datetime]) -> date:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date()


def window_dates(days: int, now: Optional[datetime] = None) -> List[date]:
    """The ``days`` calendar dates (UTC) ending today, oldest first."""
    if days <= 0:
        return []
    today = _today(now)
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def commit_day(moment: datetime) -> date:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def _label(day: date) -> str:
    return f"{day:%b} {day.day}"


def _epoch_ms(day: date) -> int:
    return int(datetime.combine(day, time.min, tzinfo=timezone.utc).timestamp() * 1000)


def build_commit_timeseries(commit_dates: Iterable[datetime],
                            days: int = DEFAULT_DAYS,
                            now: Optional[datetime] = None) -> List[CommitBucket]:
    buckets: Dict[date, int] = {day: 0 for day in window_dates(days, now)}

    for moment in commit_dates:
        day = commit_day(moment)
        if day in buckets:
            buckets[day] += 1

    return [
        CommitBucket(
            date=_label(day),
            iso_date=day.isoformat(),
            commits=count,
            timestamp=_epoch_ms(day),
        )
        for day, count in sorted(buckets.items())
    ]


def rank_repo_commits(repos: Sequence[Repository],
                      commits_by_repo: Mapping[str, Sequence[CommitRecord]],
                      days: int = DEFAULT_DAYS,
                      now: Optional[datetime] = None,
                      limit: int = TOP_REPOSITORIES) -> List[RepoCommitRank]:
    window = set(window_dates(days, now))

    counts: List[Tuple[Repository, int]] = []
    for repo in repos:
        commits = commits_by_repo.get(repo.name, ())
        count = sum(1 for commit in commits if commit_day(commit.author_date) in window)
        if count > 0:
            counts.append((repo, count))

    counts.sort(key=lambda item: item[1], reverse=True)

    return [
        RepoCommitRank(name=repo.name, commits=count, url=repo.canonical_url)
        for repo, count in counts[:limit]
    ]


def flatten_commit_dates(commits_by_repo: Mapping[str, Sequence[CommitRecord]]) -> List[datetime]:
    return [commit.author_date for commits in commits_by_repo.values() for commit in commits]


def total_commits(timeseries: Sequence[CommitBucket]) -> int:
    return sum(bucket.commits for bucket in timeseries)


def calculate_user_stats(repos: Sequence[Repository],
                         languages: Sequence[LanguageDatum],
                         timeseries: Sequence[CommitBucket],
                         by_repo: Sequence[RepoCommitRank]) -> UserStats:
    return UserStats(
        total_stars=sum(repo.stargazers_count for repo in repos),
        total_forks=sum(repo.forks_count for repo in repos),
        total_repos=len(repos),
        total_commits=total_commits(timeseries),
        top_language=languages[0].name if languages else None,
        most_active_repo=by_repo[0].name if by_repo else None,
    )


def generate_insights(stats: UserStats, timeseries: Sequence[CommitBucket]) -> List[str]:
    insights = []

    if stats.top_language:
        insights.append(f"Most used language: {stats.top_language}")

    if stats.most_active_repo:
        insights.append(f"Most active repository: {stats.most_active_repo}")

    peak = None
    for bucket in timeseries:
        if peak is None or bucket.commits > peak.commits:
            peak = bucket
    if peak is not None and peak.commits > 0:
        insights.append(f"Peak activity day: {peak.date} with {peak.commits} commits")

    if timeseries:
        average = total_commits(timeseries) / len(timeseries)
        insights.append(f"Average commits per day: {average:.1f}")

    return insights


def build_heatmap(timeseries: Sequence[CommitBucket]) -> List[HeatmapCell]:
    cells = []
    week = 0
    for bucket in timeseries:
        day = date.fromisoformat(bucket.iso_date)
        weekday = (day.weekday() + 1) % 7
        cells.append(HeatmapCell(week=week, day=weekday, commits=bucket.commits, date=bucket.iso_date))
        # Saturday closes a week
        if weekday == 6:
            week += 1
    return cells
