import logging
from typing import List, Optional, Union
from pydantic_ai import Agent
from pydantic_ai.exceptions import UserError
from pydantic_ai.models import Model
from devscope.config import ASSESSMENT_TEMPERATURE, get_default_model, get_model_api_key
from devscope.errors import AssessmentError, ConfigurationError
from devscope.models.analysis import Assessment
from devscope.models.profile import Profile, Repository
from devscope.probes.normalizer import normalize_profile_context
from devscope.refinery.validator import refine_assessment

logger = logging.getLogger(__name__)

GOOGLE_PROVIDERS = ("google-gla", "google")

# --- Prompts ---

ASSESSMENT_PROMPT = """
You are a **Distinguished Engineer** and **Chief Technology Officer (CTO)** at a top-tier tech company.
You are conducting a high-level talent review of a software engineer based on their GitHub profile.

**Your Mandate**:
Evaluate the candidate's engineering maturity, architectural thinking, and potential business impact.
Avoid generic advice like "add more comments." Focus on "Personal Branding", "System Design", and "Engineering Authority".

**Analysis Output Guidelines**:
1. **Professional Persona**: Identify their specific niche. Are they a "Full-Stack Product Engineer", a "Systems Performance Specialist", or an "Open Source Maintainer"? Be precise.
2. **Executive Summary**:
   - Write a sophisticated narrative (approx. 3-4 sentences).
   - Highlight their patterns: Do they ship finished products? Do they experiment with bleeding-edge tech?
   - Use active, professional voice (e.g., "Demonstrates strong grasp of...", "Profile suggests a focus on...").
3. **Strategic Growth Advice**:
   - Provide **one** powerful, strategic recommendation to elevate their career to the next level (e.g., Staff/Principal level).
   - Focus on high-leverage activities: contributing to major open source, writing architectural RFCs, building developer tooling, or public speaking.
   - **Do not** simply say "add a readme". Explain *why* (e.g., "Transform this repo into a case study to demonstrate system design skills").
4. **Repository Analyses**: Produce exactly one entry per repository in the input, using the repository's exact `name`.

**Scoring Calibration**:
- **90-100 (Exceptional)**: Production-ready, well-documented, widely used, or architecturally complex.
- **75-89 (Strong)**: Solid coding skills, decent documentation, consistent activity.
- **50-74 (Junior/Growth)**: Works in progress, inconsistency, sparse documentation.
- **<50 (Needs Work)**: Empty repositories, no descriptions, "hello world" projects.

**Input Data Context**:
- If specific files (like READMEs) are missing, infer based on file structure and languages.
- Treat "Forked" repositories with low weight unless they have significant contributions.

**CRITICAL INSTRUCTION:**
You MUST output your response by calling the tool/function that matches the `Assessment` schema.
Do NOT reply with plain markdown text.
"""


def resolve_model(model_name: Optional[str] = None, model: Optional[Model] = None) -> Union[Model, str]:
    """
    Returns the model to hand to an Agent. Gemini models are built with the
    configured API key; an injected Model instance is used as-is.
    """
    if model is not None:
        return model

    model_name = model_name or get_default_model()
    provider, _, name = model_name.partition(":")
    if provider not in GOOGLE_PROVIDERS:
        return model_name

    api_key = get_model_api_key()
    if not api_key:
        raise ConfigurationError("Gemini API Key is missing. Set GEMINI_API_KEY (or GOOGLE_API_KEY).")

    from pydantic_ai.models.google import GoogleModel  # lazy import
    from pydantic_ai.providers.google import GoogleProvider

    return GoogleModel(name, provider=GoogleProvider(api_key=api_key))


def build_assessment_agent(model_name: Optional[str] = None, model: Optional[Model] = None) -> Agent:
    resolved = resolve_model(model_name, model)
    try:
        return Agent(
            resolved,
            output_type=Assessment,
            system_prompt=ASSESSMENT_PROMPT,
            model_settings={"temperature": ASSESSMENT_TEMPERATURE},
            output_retries=0,
        )
    except UserError as e:
        raise ConfigurationError(f"Model '{model_name}' is not usable: {e}") from e


def assess_profile(
    profile: Profile,
    repositories: List[Repository],
    model_name: Optional[str] = None,
    model: Optional[Model] = None,
) -> Assessment:
    """
    Requests a structured assessment of the profile. The reply must validate
    against `Assessment` in one shot; anything else raises AssessmentError.
    """
    agent = build_assessment_agent(model_name, model)
    context_str = normalize_profile_context(profile, repositories)

    try:
        result = agent.run_sync(
            f"Conduct a strategic executive review of this profile: {context_str}"
        )
    except Exception as e:
        logger.debug("Assessment request failed", exc_info=True)
        raise AssessmentError(f"AI analysis failed: {e}") from e

    return refine_assessment(result.output, repositories)
