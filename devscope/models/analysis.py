from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Completeness = Literal["Low", "Medium", "High"]


class RepoAssessment(BaseModel):
    name: str
    score: float = Field(..., description="Repo quality score 0-100.")
    completeness: Completeness
    summary: str = Field(..., description="Technical summary focusing on the problem solved.")
    strengths: List[str] = Field(..., description="Key technical strengths.")
    weaknesses: List[str] = Field(..., description="Architectural or documentation gaps.")
    suggestions: List[str] = Field(..., description="Actionable improvements.")


class Assessment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    profile_score: float = Field(..., description="Professional score 0-100 based on portfolio quality.")
    professional_persona: str = Field(..., description="A 2-4 word high-level professional title (e.g., 'Distributed Systems Architect', 'Product-Minded Frontend Lead').")
    profile_summary: str = Field(..., description="A sophisticated executive summary of the developer's capability. Focus on their 'brand' and technical philosophy.")
    technical_skills: List[str] = Field(..., description="Top 5-7 inferred technical skills (focus on architectures/frameworks).")
    overall_impression: str = Field(..., description="A decisive one-sentence verdict on their engineering level.")
    career_advice: str = Field(..., description="High-level strategic advice for career growth. Focus on architectural impact, community leadership, or personal branding.")
    repo_analyses: List[RepoAssessment] = Field(..., description="One analysis per repository provided in the input.")
