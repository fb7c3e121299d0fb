"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from resume_builder.clients.gemini_client import GeminiClient
from resume_builder.clients.rate_limiter import RateLimiter
from resume_builder.models.enhancement import EnhancementRequest
from resume_builder.models.resume import (
    Achievement,
    Certification,
    Education,
    Language,
    Project,
    ResumeDocument,
    Skill,
)

TEST_ENDPOINT = "https://gemini.test/v1beta/models/test:generateContent"


def gemini_envelope(text: str) -> dict:
    """Build a generateContent reply carrying ``text``."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class SequenceTransport:
    """httpx handler replaying outcomes in order; the last one repeats."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.outcomes) > 1:
            outcome = self.outcomes.pop(0)
        else:
            outcome = self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def ok(text: str) -> httpx.Response:
    return httpx.Response(200, json=gemini_envelope(text))


@pytest.fixture
def no_sleep() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def make_client(no_sleep):
    """Factory: GeminiClient backed by a SequenceTransport."""

    def _make(*outcomes) -> tuple[GeminiClient, SequenceTransport]:
        handler = SequenceTransport(outcomes)
        client = GeminiClient(
            api_key="test-key",
            endpoint=TEST_ENDPOINT,
            transport=httpx.MockTransport(handler),
            sleep=no_sleep,
        )
        return client, handler

    return _make


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(max_requests=10, window_seconds=60)


@pytest.fixture
def enhancement_json() -> str:
    return json.dumps({
        "enhancedCareerObjective": "Software engineer building reliable mobile apps.",
        "enhancedProfessionalSummary": "Graduate with two shipped Android apps.",
        "enhancedSkills": "Kotlin, Python, SQL",
        "enhancedProjects": "Led a team of four to ship a campus events app.",
        "enhancedAchievements": "Won first place at the 2023 city hackathon.",
    })


@pytest.fixture
def score_json() -> str:
    return json.dumps({
        "score": 78,
        "feedback": "Solid foundation, thin on measurable impact.",
        "strengths": ["Clear objective", "Relevant projects"],
        "improvements": ["Quantify results"],
        "actionItems": ["Add user numbers to the events app"],
    })


@pytest.fixture
def sample_request() -> EnhancementRequest:
    return EnhancementRequest(
        resume_id=1,
        career_objective="I build apps",
        professional_summary="CS graduate",
        skills_description="Kotlin, Python",
    )


@pytest.fixture
def sample_resume() -> ResumeDocument:
    return ResumeDocument(
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        phone="555-0100",
        location="Berlin",
        career_objective="I build apps",
        professional_summary="CS graduate with mobile experience",
        template="classic",
        educations=[
            Education(
                degree="B.Sc.",
                university="TU Berlin",
                field_of_study="Computer Science",
                graduation_year=2024,
                cgpa=3.8,
            ),
        ],
        projects=[
            Project(
                project_name="Zeta Tracker",
                description="Habit tracking app",
                technologies="Kotlin, Room",
                start_date="2023-01",
                end_date="2023-06",
            ),
            Project(project_name="Alpha Chat", description="Realtime chat"),
        ],
        skills=[
            Skill(skill_name="Python", proficiency="Advanced"),
            Skill(skill_name="Docker"),
        ],
        certifications=[
            Certification(certification_name="AWS Cloud Practitioner", issuer="Amazon", issue_date="2023-09"),
        ],
        languages=[
            Language(language_name="English", proficiency="Native"),
            Language(language_name="German", proficiency="B2"),
        ],
        achievements=[
            Achievement(achievement_title="Hackathon winner", description="First place, 2023"),
        ],
    )
