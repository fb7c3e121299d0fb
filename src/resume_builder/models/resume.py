"""Pydantic models for a stored resume and its repeatable sections."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Education(BaseModel):
    degree: str
    university: str
    field_of_study: str
    graduation_year: int
    cgpa: float | None = None
    achievements: str | None = None


class Project(BaseModel):
    project_name: str
    description: str | None = None
    technologies: str | None = None
    project_link: str | None = None
    achievements: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class Skill(BaseModel):
    skill_name: str
    proficiency: str | None = None
    description: str | None = None


class Certification(BaseModel):
    certification_name: str
    issuer: str | None = None
    issue_date: str | None = None
    expiry_date: str | None = None
    description: str | None = None
    certificate_link: str | None = None


class Language(BaseModel):
    language_name: str
    proficiency: str | None = None


class Achievement(BaseModel):
    achievement_title: str
    description: str | None = None
    date: str | None = None
    category: str | None = None


class ResumeDocument(BaseModel):
    """A resume record with its section lists, in caller-supplied order."""

    id: int | None = None
    first_name: str
    last_name: str
    email: str
    phone: str
    location: str | None = None
    career_objective: str | None = None
    professional_summary: str | None = None

    # Written only from AI results
    enhanced_career_objective: str | None = None
    enhanced_professional_summary: str | None = None
    enhanced_data: str | None = None
    resume_score: float | None = None
    resume_score_feedback: str | None = None

    template: str = "classic"
    created_at: datetime | None = None
    updated_at: datetime | None = None
    generated_at: datetime | None = None

    educations: list[Education] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    languages: list[Language] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
