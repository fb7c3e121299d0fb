"""Data models for the resume builder."""

from resume_builder.models.enhancement import (
    EnhancedFields,
    EnhancementRequest,
    EnhancementResult,
    RawText,
    ScoreDetails,
    ScoreResult,
)
from resume_builder.models.resume import (
    Achievement,
    Certification,
    Education,
    Language,
    Project,
    ResumeDocument,
    Skill,
)

__all__ = [
    "Achievement",
    "Certification",
    "Education",
    "EnhancedFields",
    "EnhancementRequest",
    "EnhancementResult",
    "Language",
    "Project",
    "RawText",
    "ResumeDocument",
    "ScoreDetails",
    "ScoreResult",
    "Skill",
]
