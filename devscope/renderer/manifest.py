from collections import Counter
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from devscope.models.analysis import Assessment, RepoAssessment
from devscope.models.profile import ProfileData, Repository

ALL_LANGUAGES = "All"
SORT_OPTIONS = ("score", "stars", "forks", "updated")
TOP_LANGUAGES = 5


class RepoCard(BaseModel):
    analysis: RepoAssessment
    repo: Optional[Repository] = None  # None when the model named an unknown repository


class LanguageShare(BaseModel):
    name: str
    value: int


def _sort_key(card: RepoCard, sort_by: str) -> float:
    repo = card.repo
    if sort_by == "stars":
        return repo.stargazers_count if repo else 0
    if sort_by == "forks":
        return repo.forks_count if repo else 0
    if sort_by == "updated":
        return repo.updated_at.timestamp() if repo and repo.updated_at else 0.0
    return card.analysis.score


class RenderManifest(BaseModel):
    data: ProfileData
    assessment: Assessment
    theme: str = "dark"
    language_distribution: List[LanguageShare] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=lambda: [ALL_LANGUAGES])

    def cards(self, language: str = ALL_LANGUAGES, sort_by: str = "score") -> List[RepoCard]:
        """
        Pairs each repository analysis with its repository, filtered by
        language and sorted descending by the chosen key.
        """
        by_name: Dict[str, Repository] = {r.name: r for r in self.data.repositories}
        items = [RepoCard(analysis=ra, repo=by_name.get(ra.name)) for ra in self.assessment.repo_analyses]

        if language != ALL_LANGUAGES:
            items = [c for c in items if c.repo and c.repo.language == language]

        return sorted(items, key=lambda c: _sort_key(c, sort_by), reverse=True)


def language_distribution(repositories: List[Repository], top: int = TOP_LANGUAGES) -> List[LanguageShare]:
    counts = Counter(r.language for r in repositories if r.language)
    return [LanguageShare(name=name, value=value) for name, value in counts.most_common(top)]


def create_manifest(data: ProfileData, assessment: Assessment, theme: str = "dark") -> RenderManifest:
    """
    Wraps the fetched data and the assessment with the derived view data.
    """
    by_name = {r.name: r for r in data.repositories}
    languages = sorted({
        by_name[ra.name].language
        for ra in assessment.repo_analyses
        if ra.name in by_name and by_name[ra.name].language
    })
    return RenderManifest(
        data=data,
        assessment=assessment,
        theme=theme,
        language_distribution=language_distribution(data.repositories),
        languages=[ALL_LANGUAGES] + languages,
    )
