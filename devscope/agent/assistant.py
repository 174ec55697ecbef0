import logging
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, List, Optional
from pydantic_ai import Agent
from pydantic_ai.exceptions import UserError
from pydantic_ai.messages import ModelMessage
from pydantic_ai.models import Model
from devscope.errors import ConfigurationError
from devscope.models.analysis import Assessment
from devscope.models.profile import Profile
from devscope.refinery.engine import resolve_model

logger = logging.getLogger(__name__)

APOLOGY = "Sorry, I encountered an error. Please try again."
GREETING = "Hi! I've analyzed @{login}'s profile. I can answer questions about their skills, projects, or provide career insights."

ASSISTANT_PROMPT = """
You are a specialized AI assistant analyzing a GitHub Profile.

**Profile Context**:
- User: {display_name} (@{login})
- Bio: {bio}
- Professional Persona: {persona}
- Technical Skills: {skills}
- Profile Summary: {summary}
- Overall Impression: {impression}

**Repository Highlights**:
{highlights}

**Strict Instructions**:
1. Answer questions ONLY related to this specific developer profile, their skills, repositories, or career advice based on the data provided.
2. If the user asks general questions (e.g., "What is the capital of France?", "Write a poem about dogs"), politely decline and steer them back to the profile analysis.
3. Be concise, professional, and supportive.
4. Do not make up facts about the user that are not in the context.
"""


class SessionState(str, Enum):
    READY = "ready"
    AWAITING = "awaiting"
    STREAMING = "streaming"
    FAILED = "failed"  # last send failed; the session is still usable


@dataclass
class ChatMessage:
    role: str  # "user" or "model"
    text: str


def build_assistant_context(profile: Profile, assessment: Assessment) -> str:
    highlights = "\n".join(
        f"- {ra.name}: {ra.summary} (Score: {ra.score:g})" for ra in assessment.repo_analyses
    )
    return ASSISTANT_PROMPT.format(
        display_name=profile.name or profile.login,
        login=profile.login,
        bio=profile.bio or "No bio",
        persona=assessment.professional_persona,
        skills=", ".join(assessment.technical_skills),
        summary=assessment.profile_summary,
        impression=assessment.overall_impression,
        highlights=highlights or "- (none)",
    )


class AssistantSession:
    """
    Follow-up chat about one analysed profile.

    The system prompt is derived once from the profile and assessment. Each
    `send` streams a reply and appends to the history; a failed send yields
    the apology text instead of raising. Callers must not overlap sends.
    """

    def __init__(
        self,
        profile: Profile,
        assessment: Assessment,
        model_name: Optional[str] = None,
        model: Optional[Model] = None,
    ):
        self.profile = profile
        self.context = build_assistant_context(profile, assessment)
        try:
            self.agent = Agent(resolve_model(model_name, model), system_prompt=self.context)
        except UserError as e:
            raise ConfigurationError(f"Model '{model_name}' is not usable: {e}") from e
        self.history: List[ModelMessage] = []
        self.transcript: List[ChatMessage] = [ChatMessage("model", GREETING.format(login=profile.login))]
        self.state = SessionState.READY

    @classmethod
    def open(
        cls,
        profile: Profile,
        assessment: Assessment,
        model_name: Optional[str] = None,
        model: Optional[Model] = None,
    ) -> "AssistantSession":
        return cls(profile, assessment, model_name=model_name, model=model)

    @property
    def greeting(self) -> str:
        return self.transcript[0].text

    async def send(self, text: str) -> AsyncIterator[str]:
        """Yields the reply as text deltas in arrival order."""
        self.transcript.append(ChatMessage("user", text))
        reply = ChatMessage("model", "")
        self.transcript.append(reply)
        self.state = SessionState.AWAITING

        try:
            async with self.agent.run_stream(text, message_history=self.history) as result:
                self.state = SessionState.STREAMING
                async for delta in result.stream_text(delta=True):
                    reply.text += delta
                    yield delta
                self.history.extend(result.new_messages())
        except Exception:
            logger.warning("Assistant reply failed", exc_info=True)
            self.state = SessionState.FAILED
            if reply.text:
                self.transcript.append(ChatMessage("model", APOLOGY))
            else:
                reply.text = APOLOGY
            yield APOLOGY
            return

        self.state = SessionState.READY
