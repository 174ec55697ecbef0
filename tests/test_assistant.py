import pytest
from pydantic_ai.exceptions import UserError
from pydantic_ai.models.function import AgentInfo, FunctionModel
from devscope.agent.assistant import APOLOGY, AssistantSession, SessionState, build_assistant_context
from devscope.errors import ConfigurationError
from devscope.models.analysis import Assessment, RepoAssessment
from devscope.models.profile import Profile

PROFILE = Profile(login="octo", name="Octo Cat", bio="Builds things")
ASSESSMENT = Assessment(
    profile_score=77,
    professional_persona="Backend Tooling Engineer",
    profile_summary="Ships focused CLI tools.",
    technical_skills=["Python", "Go"],
    overall_impression="Solid.",
    career_advice="Write more.",
    repo_analyses=[
        RepoAssessment(name="alpha", score=85, completeness="High", summary="A fast CLI.",
                       strengths=[], weaknesses=[], suggestions=[]),
    ],
)


def unused(messages, info):
    raise AssertionError("non-streaming call not expected")


async def collect(session, text):
    return [delta async for delta in session.send(text)]


def test_context_is_scoped_to_profile():
    context = build_assistant_context(PROFILE, ASSESSMENT)
    assert "Octo Cat (@octo)" in context
    assert "alpha: A fast CLI. (Score: 85)" in context
    assert "ONLY related to this specific developer profile" in context


def test_open_records_greeting():
    session = AssistantSession.open(PROFILE, ASSESSMENT, model=FunctionModel(unused))
    assert session.state == SessionState.READY
    assert "@octo" in session.greeting
    assert session.history == []


def test_open_without_credential(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        AssistantSession.open(PROFILE, ASSESSMENT, model_name="google-gla:gemini-2.5-flash")


def test_open_with_unusable_model(monkeypatch):
    def reject(*args, **kwargs):
        raise UserError("Unknown model: nowhere:nothing")

    monkeypatch.setattr("devscope.agent.assistant.Agent", reject)
    with pytest.raises(ConfigurationError, match="not usable"):
        AssistantSession.open(PROFILE, ASSESSMENT, model_name="nowhere:nothing", model=FunctionModel(unused))


@pytest.mark.asyncio
async def test_send_streams_deltas_in_order():
    async def stream(messages, info: AgentInfo):
        yield "Octo is "
        yield "a backend "
        yield "engineer."

    session = AssistantSession.open(PROFILE, ASSESSMENT, model=FunctionModel(unused, stream_function=stream))
    deltas = await collect(session, "Who is this?")

    assert "".join(deltas) == "Octo is a backend engineer."
    assert session.state == SessionState.READY
    assert session.transcript[-2].role == "user"
    assert session.transcript[-1].text == "Octo is a backend engineer."
    assert len(session.history) > 0


@pytest.mark.asyncio
async def test_history_grows_across_sends():
    seen_lengths = []

    async def stream(messages, info):
        seen_lengths.append(len(messages))
        yield "ok"

    session = AssistantSession.open(PROFILE, ASSESSMENT, model=FunctionModel(unused, stream_function=stream))
    await collect(session, "first")
    after_first = len(session.history)
    await collect(session, "second")

    assert len(session.history) > after_first
    assert seen_lengths[1] > seen_lengths[0]


@pytest.mark.asyncio
async def test_failed_send_yields_apology_and_session_survives():
    state = {"fail": True}

    async def stream(messages, info):
        if state["fail"]:
            raise RuntimeError("network down")
        yield "back online"

    session = AssistantSession.open(PROFILE, ASSESSMENT, model=FunctionModel(unused, stream_function=stream))

    assert await collect(session, "hello?") == [APOLOGY]
    assert session.state == SessionState.FAILED
    assert session.transcript[-1].text == APOLOGY
    assert session.history == []

    state["fail"] = False
    assert "".join(await collect(session, "again")) == "back online"
    assert session.state == SessionState.READY
