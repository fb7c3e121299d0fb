"""Resume orchestrator - ties storage, AI gateway and PDF export together."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from resume_builder.errors import AiServiceUnavailable
from resume_builder.export.composer import compose, resolve_theme
from resume_builder.export.pdf_renderer import render_pdf
from resume_builder.models.enhancement import (
    EnhancedFields,
    EnhancementRequest,
    ScoreDetails,
)
from resume_builder.models.resume import ResumeDocument
from resume_builder.pipeline.ai_gateway import AiGateway
from resume_builder.storage.resume_store import ResumeStore

logger = logging.getLogger(__name__)

# Fields a partial update may touch; AI-written fields are excluded.
UPDATABLE_FIELDS = frozenset({
    "first_name",
    "last_name",
    "email",
    "phone",
    "location",
    "career_objective",
    "professional_summary",
    "template",
    "educations",
    "projects",
    "skills",
    "certifications",
    "languages",
    "achievements",
})


def build_enhancement_request(resume: ResumeDocument) -> EnhancementRequest:
    """Derive the AI request text from a stored resume."""
    skills = ", ".join(
        f"{s.skill_name} ({s.proficiency})" if s.proficiency else s.skill_name
        for s in resume.skills
    )
    projects = "; ".join(
        f"{p.project_name}: {p.description}" if p.description else p.project_name
        for p in resume.projects
    )
    achievements = "; ".join(
        f"{a.achievement_title}: {a.description}" if a.description else a.achievement_title
        for a in resume.achievements
    )
    return EnhancementRequest(
        resume_id=resume.id,
        career_objective=resume.career_objective,
        professional_summary=resume.professional_summary,
        skills_description=skills or None,
        project_descriptions=projects or None,
        achievements_description=achievements or None,
    )


class ResumeOrchestrator:
    """Runs enhancement, scoring and PDF generation against stored resumes.

    AI results are applied to a copy of the stored resume and written back
    in one save, so a failed call leaves the record untouched.
    """

    def __init__(
        self,
        store: ResumeStore,
        gateway: AiGateway | None = None,
        *,
        renderer: Callable[[str], bytes] = render_pdf,
    ):
        self.store = store
        self.gateway = gateway
        self.renderer = renderer

    # --- storage pass-through ---

    def create_resume(self, resume: ResumeDocument) -> ResumeDocument:
        stored = self.store.create(
            resume.model_copy(update={"template": resolve_theme(resume.template)})
        )
        logger.info("Resume created with ID: %d", stored.id)
        return stored

    def get_resume(self, resume_id: int) -> ResumeDocument:
        return self.store.get(resume_id)

    def list_resumes(self) -> list[ResumeDocument]:
        return [self.store.get(i) for i in self.store.list_ids()]

    def update_resume(self, resume_id: int, changes: dict[str, Any]) -> ResumeDocument:
        """Apply a partial update; keys that are None or not updatable are ignored."""
        resume = self.store.get(resume_id)
        update = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
        if "template" in update:
            update["template"] = resolve_theme(update["template"])
        merged = ResumeDocument.model_validate({**resume.model_dump(), **update})
        saved = self.store.save(merged)
        logger.info("Resume updated with ID: %d", resume_id)
        return saved

    def delete_resume(self, resume_id: int) -> None:
        self.store.delete(resume_id)
        logger.info("Resume deleted with ID: %d", resume_id)

    # --- AI operations ---

    async def aclose(self) -> None:
        """Release the AI gateway's HTTP connections."""
        if self.gateway is not None:
            await self.gateway.aclose()

    def _require_gateway(self) -> AiGateway:
        if self.gateway is None:
            raise AiServiceUnavailable("No AI gateway configured")
        return self.gateway

    async def enhance_resume(
        self,
        resume_id: int,
        request: EnhancementRequest | None = None,
    ) -> ResumeDocument:
        """Enhance the resume text and persist the result."""
        resume = self.store.get(resume_id)
        if request is None:
            request = build_enhancement_request(resume)

        result = await self._require_gateway().enhance(request)

        if isinstance(result, EnhancedFields):
            update = {
                "enhanced_career_objective": result.enhanced_objective,
                "enhanced_professional_summary": result.enhanced_summary,
                "enhanced_data": None,
            }
        else:
            logger.warning("Could not parse enhanced JSON, storing raw response")
            update = {"enhanced_data": result.payload}

        saved = self.store.save(resume.model_copy(update=update))
        logger.info("Resume enhanced with ID: %d", resume_id)
        return saved

    async def score_resume(
        self,
        resume_id: int,
        request: EnhancementRequest | None = None,
    ) -> ResumeDocument:
        """Score the resume and persist score and feedback."""
        resume = self.store.get(resume_id)
        if request is None:
            request = build_enhancement_request(resume)

        result = await self._require_gateway().score(request)

        if isinstance(result, ScoreDetails):
            update = {
                "resume_score": result.score,
                "resume_score_feedback": result.feedback,
            }
        else:
            logger.warning("Could not parse score JSON, storing raw response")
            update = {"resume_score_feedback": result.payload}

        saved = self.store.save(resume.model_copy(update=update))
        logger.info("Resume score calculated for ID: %d", resume_id)
        return saved

    # --- export ---

    def preview_html(self, resume_id: int, theme: str | None = None) -> str:
        return compose(self.store.get(resume_id), theme=theme)

    def generate_pdf(self, resume_id: int, theme: str | None = None) -> bytes:
        """Compose and render the resume, then stamp ``generated_at``."""
        resume = self.store.get(resume_id)
        pdf_bytes = self.renderer(compose(resume, theme=theme))
        self.store.save(resume.model_copy(update={"generated_at": datetime.now()}))
        logger.info("PDF generated for resume ID: %d", resume_id)
        return pdf_bytes
