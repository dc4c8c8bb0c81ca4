from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class UserProfile(BaseModel):
    login: str = Field(..., min_length=1, description="GitHub username")
    id: int = Field(..., description="GitHub account id")
    avatar_url: str = Field("", description="URL to user's avatar image")
    html_url: Optional[str] = Field(None, description="Profile page URL")
    name: Optional[str] = Field(None, description="Display name")
    company: Optional[str] = Field(None, description="Company")
    blog: Optional[str] = Field(None, description="Website or blog URL")
    location: Optional[str] = Field(None, description="Location")
    email: Optional[str] = Field(None, description="Public email")
    hireable: Optional[bool] = Field(None, description="Hireable flag")
    bio: Optional[str] = Field(None, description="Profile bio")
    twitter_username: Optional[str] = Field(None, description="Twitter handle")
    public_repos: int = Field(0, ge=0, description="Number of public repositories")
    public_gists: int = Field(0, ge=0, description="Number of public gists")
    followers: int = Field(0, ge=0, description="Follower count")
    following: int = Field(0, ge=0, description="Following count")
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Last profile update time")


class RepositoryOwner(BaseModel):
    login: str = Field(..., min_length=1, description="Owner username")
    avatar_url: str = Field("", description="URL to owner's avatar image")


class Repository(BaseModel):
    id: int = Field(..., description="GitHub repository id")
    name: str = Field(..., min_length=1, description="Repository name")
    full_name: str = Field(..., description="Repository name with owner")
    private: bool = Field(False, description="Private repository flag")
    owner: RepositoryOwner
    html_url: str = Field(..., description="GitHub repository URL")
    description: Optional[str] = Field(None, description="Repository description")
    fork: bool = Field(False, description="Whether the repository is a fork")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last update time")
    pushed_at: Optional[datetime] = Field(None, description="Last push time")
    homepage: Optional[str] = Field(None, description="Homepage URL")
    size: int = Field(0, ge=0, description="Repository size in KB")
    stargazers_count: int = Field(0, ge=0, description="Total number of stars")
    watchers_count: int = Field(0, ge=0, description="Total number of watchers")
    forks_count: int = Field(0, ge=0, description="Total number of forks")
    open_issues_count: int = Field(0, ge=0, description="Open issues and pull requests")
    language: Optional[str] = Field(None, description="Primary programming language")
    default_branch: str = Field("main", description="Default branch name")
    topics: List[str] = Field(default_factory=list, description="Repository topics")

    @field_validator("topics")
    @classmethod
    def dedupe_topics(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))

    @property
    def last_activity(self) -> datetime:
        return self.pushed_at or self.updated_at

    @property
    def canonical_url(self) -> str:
        return self.html_url or f"https://github.com/{self.owner.login}/{self.name}"


class CommitAuthor(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    date: datetime


class CommitDetail(BaseModel):
    author: CommitAuthor
    message: str = ""


class CommitPayload(BaseModel):
    sha: str
    commit: CommitDetail
    html_url: Optional[str] = None


class CommitRecord(BaseModel):
    sha: str = Field(..., description="Commit SHA")
    repository: str = Field(..., description="Repository the commit belongs to")
    author_date: datetime = Field(..., description="Author date, used for bucketing")
    message: str = Field("", description="Commit message")
    html_url: Optional[str] = Field(None, description="Commit page URL")

    @classmethod
    def from_api(cls, raw: dict, repository: str) -> "CommitRecord":
        payload = CommitPayload.model_validate(raw)
        return cls(
            sha=payload.sha,
            repository=repository,
            author_date=payload.commit.author.date,
            message=payload.commit.message,
            html_url=payload.html_url,
        )


class RateLimitInfo(BaseModel):
    limit: Optional[int] = Field(None, description="Request ceiling for the current window")
    remaining: Optional[int] = Field(None, description="Requests left in the current window")
    reset: Optional[int] = Field(None, description="Window reset time as a unix timestamp")
