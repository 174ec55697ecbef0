import logging
from typing import List
from devscope.models.analysis import Assessment
from devscope.models.profile import Repository

logger = logging.getLogger(__name__)


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, score))


def unmatched_repo_names(assessment: Assessment, repositories: List[Repository]) -> List[str]:
    """
    Names the model analysed that were not among the fetched repositories.
    """
    known = {repo.name for repo in repositories}
    return [ra.name for ra in assessment.repo_analyses if ra.name not in known]


def refine_assessment(assessment: Assessment, repositories: List[Repository]) -> Assessment:
    """
    Clamps scores into 0-100 and reports analyses that reference unknown
    repositories. Mismatches are kept; the renderer tolerates them.
    """
    unknown = unmatched_repo_names(assessment, repositories)
    if unknown:
        logger.warning("Assessment references unknown repositories: %s", ", ".join(unknown))

    return assessment.model_copy(update={
        "profile_score": _clamp(assessment.profile_score),
        "repo_analyses": [
            ra.model_copy(update={"score": _clamp(ra.score)}) for ra in assessment.repo_analyses
        ],
    })
