"""Pydantic models for AI enhancement requests and results."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fixed order and labels of the sections sent to the AI service.
SECTION_LABELS: tuple[tuple[str, str], ...] = (
    ("career_objective", "Career Objective"),
    ("professional_summary", "Professional Summary"),
    ("skills_description", "Skills"),
    ("project_descriptions", "Projects"),
    ("achievements_description", "Achievements"),
)


class EnhancementRequest(BaseModel):
    resume_id: int | None = None
    career_objective: str | None = None
    professional_summary: str | None = None
    skills_description: str | None = None
    project_descriptions: str | None = None
    achievements_description: str | None = None

    def combined_text(self) -> str:
        """Concatenate the present sections, one labelled line each."""
        lines = []
        for attr, label in SECTION_LABELS:
            value = getattr(self, attr)
            if value:
                lines.append(f"{label}: {value}\n")
        return "".join(lines)


def _join_if_list(value: Any) -> Any:
    if isinstance(value, list):
        return "\n".join(str(v) for v in value)
    return value


class RawText(BaseModel):
    """Model output that did not match the requested JSON shape."""

    kind: Literal["raw"] = "raw"
    payload: str


class EnhancedFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["structured"] = "structured"
    enhanced_objective: str | None = Field(default=None, alias="enhancedCareerObjective")
    enhanced_summary: str | None = Field(default=None, alias="enhancedProfessionalSummary")
    enhanced_skills: str | None = Field(default=None, alias="enhancedSkills")
    enhanced_projects: str | None = Field(default=None, alias="enhancedProjects")
    enhanced_achievements: str | None = Field(default=None, alias="enhancedAchievements")

    @field_validator(
        "enhanced_objective",
        "enhanced_summary",
        "enhanced_skills",
        "enhanced_projects",
        "enhanced_achievements",
        mode="before",
    )
    @classmethod
    def _flatten_lists(cls, v: Any) -> Any:
        return _join_if_list(v)


class ScoreDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["structured"] = "structured"
    score: float = Field(allow_inf_nan=False)
    feedback: str | None = None
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list, alias="actionItems")

    @field_validator("score")
    @classmethod
    def _clamp_score(cls, v: float) -> float:
        return max(0.0, min(100.0, v))

    @field_validator("strengths", "improvements", "action_items", mode="before")
    @classmethod
    def _wrap_single(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


EnhancementResult = Annotated[Union[EnhancedFields, RawText], Field(discriminator="kind")]
ScoreResult = Annotated[Union[ScoreDetails, RawText], Field(discriminator="kind")]
