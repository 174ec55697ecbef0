import json
from datetime import datetime
from typing import Any, Dict, List, Optional
from devscope.config import MAX_PROMPT_REPOS, NO_README_SENTINEL, PROMPT_README_MAX_CHARS
from devscope.models.profile import Profile, Repository


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def build_assessment_payload(
    profile: Profile,
    repositories: List[Repository],
    max_repos: int = MAX_PROMPT_REPOS,
    max_readme_chars: int = PROMPT_README_MAX_CHARS,
) -> Dict[str, Any]:
    """
    Compact projection of the profile and its repositories, small enough to
    send as a single prompt.
    """
    return {
        "username": profile.login,
        "name": profile.name,
        "bio": profile.bio,
        "public_repos": profile.public_repos,
        "followers": profile.followers,
        "created_at": _iso(profile.created_at),
        "repositories": [
            {
                "name": repo.name,
                "description": repo.description,
                "language": repo.language,
                "stargazers": repo.stargazers_count,
                "updated_at": _iso(repo.updated_at),
                "homepage": repo.homepage,
                "topics": repo.topics,
                "readme_preview": repo.readme_excerpt[:max_readme_chars] if repo.readme_excerpt else NO_README_SENTINEL,
            }
            for repo in repositories[:max_repos]
        ],
    }


def normalize_profile_context(profile: Profile, repositories: List[Repository]) -> str:
    return json.dumps(build_assessment_payload(profile, repositories), ensure_ascii=False)
