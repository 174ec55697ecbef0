from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    login: str = Field(..., description="Unique GitHub handle")
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    company: Optional[str] = None
    blog: Optional[str] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: Optional[datetime] = None


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    full_name: Optional[str] = None
    html_url: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None
    homepage: Optional[str] = None
    size: int = 0
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    topics: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None
    fork: bool = False
    archived: bool = False
    disabled: bool = False
    readme_excerpt: Optional[str] = Field(None, description="Decoded, truncated README text, or None when unavailable")


class ContributionDay(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    date: date
    count: int = 0


class ContributionStats(BaseModel):
    total: int = 0
    longest_streak: int = 0
    current_streak: int = 0


class ProfileData(BaseModel):
    """Everything fetched for one analysis session."""

    profile: Profile
    repositories: List[Repository] = Field(default_factory=list)
    stats: ContributionStats = Field(default_factory=ContributionStats)
