import json
import pytest
from pydantic_ai.messages import ModelMessage, ModelResponse, ToolCallPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from devscope.errors import AssessmentError, ConfigurationError
from devscope.models.profile import Profile, Repository
from devscope.probes.normalizer import build_assessment_payload, normalize_profile_context
from devscope.refinery.engine import assess_profile
from devscope.refinery.validator import refine_assessment, unmatched_repo_names
from devscope.models.analysis import Assessment

PROFILE = Profile(login="octo", name="Octo Cat", bio="Builds things", public_repos=2, followers=5)
REPOS = [
    Repository(id=1, name="alpha", language="Python", stargazers_count=3, readme_excerpt="r" * 3000),
    Repository(id=2, name="beta", language="Go"),
]


def assessment_args(**overrides):
    args = {
        "profileScore": 81,
        "professionalPersona": "Backend Tooling Engineer",
        "profileSummary": "Ships focused CLI tools.",
        "technicalSkills": ["Python", "Go"],
        "overallImpression": "A solid mid-level engineer.",
        "careerAdvice": "Publish a design write-up for alpha.",
        "repoAnalyses": [
            {
                "name": "alpha",
                "score": 85,
                "completeness": "High",
                "summary": "A fast CLI.",
                "strengths": ["tests"],
                "weaknesses": ["docs"],
                "suggestions": ["add benchmarks"],
            }
        ],
    }
    args.update(overrides)
    return args


def model_returning(args, calls=None):
    def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        if calls is not None:
            calls.append(messages)
        return ModelResponse(parts=[ToolCallPart(info.output_tools[0].name, args)])

    return FunctionModel(respond)


def test_payload_projection():
    payload = build_assessment_payload(PROFILE, REPOS)
    assert payload["username"] == "octo"
    assert payload["followers"] == 5
    alpha, beta = payload["repositories"]
    assert alpha["stargazers"] == 3
    assert len(alpha["readme_preview"]) == 1500
    assert beta["readme_preview"] == "No README content available."


def test_payload_caps_repositories():
    many = [Repository(id=i, name=f"r{i}") for i in range(10)]
    assert len(build_assessment_payload(PROFILE, many)["repositories"]) == 6


def test_context_is_json():
    assert json.loads(normalize_profile_context(PROFILE, REPOS))["name"] == "Octo Cat"


def test_assess_profile_parses_structured_output():
    calls = []
    assessment = assess_profile(PROFILE, REPOS, model=model_returning(assessment_args(), calls))

    assert assessment.profile_score == 81
    assert assessment.professional_persona == "Backend Tooling Engineer"
    assert assessment.repo_analyses[0].completeness == "High"
    assert len(calls) == 1
    assert "octo" in str(calls[0])


def test_missing_repo_analyses_is_an_error():
    args = assessment_args()
    del args["repoAnalyses"]
    with pytest.raises(AssessmentError):
        assess_profile(PROFILE, REPOS, model=model_returning(args))


def test_invalid_completeness_is_an_error():
    bad = assessment_args()
    bad["repoAnalyses"][0]["completeness"] = "Somewhat"
    with pytest.raises(AssessmentError):
        assess_profile(PROFILE, REPOS, model=model_returning(bad))


def test_model_failure_is_an_error():
    def explode(messages, info):
        raise RuntimeError("service unavailable")

    with pytest.raises(AssessmentError):
        assess_profile(PROFILE, REPOS, model=FunctionModel(explode))


def test_missing_credential(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        assess_profile(PROFILE, REPOS, model_name="google-gla:gemini-2.5-flash")


def test_refine_clamps_scores_and_keeps_unknown_repos():
    raw = Assessment.model_validate(assessment_args(
        profileScore=140,
        repoAnalyses=[
            {"name": "alpha", "score": -5, "completeness": "Low", "summary": "s",
             "strengths": [], "weaknesses": [], "suggestions": []},
            {"name": "ghost", "score": 50, "completeness": "Medium", "summary": "s",
             "strengths": [], "weaknesses": [], "suggestions": []},
        ],
    ))

    refined = refine_assessment(raw, REPOS)

    assert refined.profile_score == 100
    assert refined.repo_analyses[0].score == 0
    assert [ra.name for ra in refined.repo_analyses] == ["alpha", "ghost"]
    assert unmatched_repo_names(refined, REPOS) == ["ghost"]
