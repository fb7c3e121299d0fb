"""Tests for ResumeOrchestrator."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resume_builder.errors import AiServiceUnavailable, RenderingFailed, ResumeNotFound
from resume_builder.models.enhancement import (
    EnhancedFields,
    EnhancementRequest,
    RawText,
    ScoreDetails,
)
from resume_builder.models.resume import Skill
from resume_builder.pipeline.ai_gateway import AiGateway
from resume_builder.pipeline.orchestrator import (
    ResumeOrchestrator,
    build_enhancement_request,
)
from resume_builder.storage.resume_store import ResumeStore


@pytest.fixture
def store(tmp_path):
    return ResumeStore(tmp_path / "resumes.db")


@pytest.fixture
def gateway():
    return AsyncMock(spec=AiGateway)


@pytest.fixture
def orchestrator(store, gateway):
    return ResumeOrchestrator(store, gateway, renderer=lambda html: b"%PDF-stub")


@pytest.fixture
def stored(orchestrator, sample_resume):
    return orchestrator.create_resume(sample_resume)


class TestBuildEnhancementRequest:
    def test_sections_flattened(self, sample_resume):
        sample_resume.id = 7
        request = build_enhancement_request(sample_resume)

        assert request.resume_id == 7
        assert request.career_objective == "I build apps"
        assert request.skills_description == "Python (Advanced), Docker"
        assert request.project_descriptions == "Zeta Tracker: Habit tracking app; Alpha Chat: Realtime chat"
        assert request.achievements_description == "Hackathon winner: First place, 2023"

    def test_empty_lists_become_none(self, sample_resume):
        resume = sample_resume.model_copy(update={"skills": [], "projects": [], "achievements": []})
        request = build_enhancement_request(resume)

        assert request.skills_description is None
        assert request.project_descriptions is None
        assert "Skills" not in request.combined_text()


class TestCrud:
    def test_create_assigns_id(self, stored):
        assert stored.id is not None
        assert stored.created_at is not None

    def test_create_resolves_theme(self, orchestrator, sample_resume):
        created = orchestrator.create_resume(sample_resume.model_copy(update={"template": "MODERN"}))
        assert created.template == "modern"

        unknown = orchestrator.create_resume(sample_resume.model_copy(update={"template": "neon"}))
        assert unknown.template == "classic"

    def test_get_missing_raises(self, orchestrator):
        with pytest.raises(ResumeNotFound, match="Resume not found with ID: 99"):
            orchestrator.get_resume(99)

    def test_list(self, orchestrator, sample_resume):
        orchestrator.create_resume(sample_resume)
        orchestrator.create_resume(sample_resume)
        assert len(orchestrator.list_resumes()) == 2

    def test_partial_update(self, orchestrator, stored):
        updated = orchestrator.update_resume(stored.id, {
            "location": "Munich",
            "phone": None,
            "resume_score": 99,
            "skills": [{"skill_name": "Go"}],
        })

        assert updated.location == "Munich"
        assert updated.phone == "555-0100"
        assert updated.resume_score is None
        assert updated.skills == [Skill(skill_name="Go")]
        assert orchestrator.get_resume(stored.id).location == "Munich"

    def test_update_missing_raises(self, orchestrator):
        with pytest.raises(ResumeNotFound):
            orchestrator.update_resume(5, {"location": "x"})

    def test_delete(self, orchestrator, stored):
        orchestrator.delete_resume(stored.id)
        with pytest.raises(ResumeNotFound):
            orchestrator.get_resume(stored.id)


class TestEnhance:
    async def test_structured_result_applied(self, orchestrator, gateway, stored):
        gateway.enhance.return_value = EnhancedFields(
            enhanced_objective="Builds reliable apps",
            enhanced_summary="Graduate engineer",
        )

        result = await orchestrator.enhance_resume(stored.id)

        assert result.enhanced_career_objective == "Builds reliable apps"
        assert result.enhanced_professional_summary == "Graduate engineer"
        assert result.enhanced_data is None
        reloaded = orchestrator.get_resume(stored.id)
        assert reloaded.enhanced_career_objective == "Builds reliable apps"

    async def test_raw_result_stored(self, orchestrator, gateway, stored):
        gateway.enhance.return_value = RawText(payload="not json")

        result = await orchestrator.enhance_resume(stored.id)

        assert result.enhanced_data == "not json"
        assert result.enhanced_career_objective is None
        assert orchestrator.get_resume(stored.id).enhanced_data == "not json"

    async def test_request_derived_from_resume(self, orchestrator, gateway, stored):
        gateway.enhance.return_value = RawText(payload="x")

        await orchestrator.enhance_resume(stored.id)

        [request] = gateway.enhance.call_args.args
        assert request.resume_id == stored.id
        assert request.skills_description == "Python (Advanced), Docker"

    async def test_explicit_request_used(self, orchestrator, gateway, stored):
        gateway.enhance.return_value = RawText(payload="x")
        request = EnhancementRequest(resume_id=stored.id, career_objective="Other")

        await orchestrator.enhance_resume(stored.id, request)

        gateway.enhance.assert_awaited_once_with(request)

    async def test_failure_leaves_record_unchanged(self, orchestrator, gateway, stored):
        gateway.enhance.side_effect = AiServiceUnavailable("down")

        with pytest.raises(AiServiceUnavailable):
            await orchestrator.enhance_resume(stored.id)

        reloaded = orchestrator.get_resume(stored.id)
        assert reloaded.enhanced_career_objective is None
        assert reloaded.enhanced_data is None
        assert reloaded.updated_at == stored.updated_at

    async def test_missing_resume_skips_gateway(self, orchestrator, gateway):
        with pytest.raises(ResumeNotFound):
            await orchestrator.enhance_resume(42)
        gateway.enhance.assert_not_awaited()

    async def test_no_gateway(self, store, stored):
        with pytest.raises(AiServiceUnavailable, match="No AI gateway"):
            await ResumeOrchestrator(store).enhance_resume(stored.id)

    async def test_aclose_closes_gateway(self, orchestrator, gateway):
        await orchestrator.aclose()
        gateway.aclose.assert_awaited_once()

    async def test_aclose_without_gateway(self, store):
        await ResumeOrchestrator(store).aclose()


class TestScore:
    async def test_structured_score(self, orchestrator, gateway, stored):
        gateway.score.return_value = ScoreDetails(score=78, feedback="Solid")

        result = await orchestrator.score_resume(stored.id)

        assert result.resume_score == 78
        assert result.resume_score_feedback == "Solid"

    async def test_raw_score_keeps_previous_score(self, orchestrator, gateway, stored):
        gateway.score.return_value = ScoreDetails(score=60, feedback="First")
        await orchestrator.score_resume(stored.id)

        gateway.score.return_value = RawText(payload="Score: 7/10")
        result = await orchestrator.score_resume(stored.id)

        assert result.resume_score == 60
        assert result.resume_score_feedback == "Score: 7/10"


class TestExport:
    def test_preview_html(self, orchestrator, stored):
        html = orchestrator.preview_html(stored.id)
        assert "<h1>Jane Doe</h1>" in html

    def test_preview_theme_override(self, orchestrator, stored):
        assert "#667eea" in orchestrator.preview_html(stored.id, theme="modern")

    def test_generate_pdf_stamps_generated_at(self, orchestrator, stored):
        assert stored.generated_at is None

        pdf = orchestrator.generate_pdf(stored.id)

        assert pdf == b"%PDF-stub"
        assert orchestrator.get_resume(stored.id).generated_at is not None

    def test_renderer_receives_themed_html(self, store, stored):
        seen = []
        orchestrator = ResumeOrchestrator(store, renderer=lambda html: seen.append(html) or b"%PDF")

        orchestrator.generate_pdf(stored.id, theme="creative")

        assert "#f39c12" in seen[0]

    def test_render_failure_leaves_generated_at(self, store, stored):
        def broken(html):
            raise RenderingFailed("boom")

        orchestrator = ResumeOrchestrator(store, renderer=broken)
        with pytest.raises(RenderingFailed):
            orchestrator.generate_pdf(stored.id)

        assert orchestrator.get_resume(stored.id).generated_at is None
