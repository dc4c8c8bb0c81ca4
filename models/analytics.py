from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional

from models.github import Repository, UserProfile


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LanguageDatum(CamelModel):
    name: str = Field(..., description="Language name")
    bytes: int = Field(..., ge=0, description="Total bytes across repositories")
    repos: int = Field(..., ge=0, description="Number of repositories using the language")
    percentage: float = Field(..., description="Share of all bytes, 0-100")
    color: str = Field(..., description="Display color as #rrggbb")


class CommitBucket(CamelModel):
    date: str = Field(..., description="Display label, e.g. 'Jan 1'")
    iso_date: str = Field(..., description="Calendar date, YYYY-MM-DD")
    commits: int = Field(0, ge=0, description="Commits authored on this day")
    timestamp: int = Field(..., description="UTC midnight in milliseconds since epoch")


class RepoCommitRank(CamelModel):
    name: str = Field(..., description="Repository name")
    commits: int = Field(..., gt=0, description="Commits in the window")
    url: str = Field(..., description="Repository URL")


class HeatmapCell(CamelModel):
    week: int = Field(..., ge=0, description="Week index from the start of the window")
    day: int = Field(..., ge=0, le=6, description="Day of week, Sunday is 0")
    commits: int = Field(0, ge=0, description="Commits on this day")
    date: str = Field(..., description="Calendar date, YYYY-MM-DD")


class UserStats(CamelModel):
    total_stars: int = 0
    total_forks: int = 0
    total_repos: int = 0
    total_commits: int = 0
    top_language: Optional[str] = None
    most_active_repo: Optional[str] = None


class LanguagesView(CamelModel):
    languages: List[LanguageDatum]
    total_repos: int


class CommitsView(CamelModel):
    timeseries: List[CommitBucket]
    by_repo: List[RepoCommitRank]
    total_commits: int


class HeatmapView(CamelModel):
    heatmap: List[HeatmapCell]
    total_commits: int


class AnalyticsCommits(CamelModel):
    timeseries: List[CommitBucket]
    by_repo: List[RepoCommitRank]
    total: int


class AnalyticsView(CamelModel):
    user: UserProfile
    repos: List[Repository]
    languages: List[LanguageDatum]
    commits: AnalyticsCommits
    stats: UserStats
    insights: List[str]
