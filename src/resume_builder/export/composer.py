"""Themed HTML composition of a stored resume."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from resume_builder.models.resume import ResumeDocument

logger = logging.getLogger(__name__)

CSS_THEMES_DIR = Path(__file__).parent / "css_themes"
TEMPLATES_DIR = Path(__file__).parent / "templates"

AVAILABLE_THEMES = ("classic", "modern", "creative")
DEFAULT_THEME = "classic"

CONTACT_SEPARATOR = " | "


def resolve_theme(theme: str | None) -> str:
    """Normalize a theme name; unknown or missing names become the default."""
    name = (theme or "").strip().lower()
    if name not in AVAILABLE_THEMES:
        if name:
            logger.debug("Unknown theme %r, using %s", theme, DEFAULT_THEME)
        return DEFAULT_THEME
    return name


@lru_cache(maxsize=None)
def _theme_css(theme: str) -> str:
    return (CSS_THEMES_DIR / f"{theme}.css").read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _prefer_enhanced(enhanced: str | None, raw: str | None) -> str:
    """Enhanced text when it has content, else the raw text; stripped."""
    if enhanced and enhanced.strip():
        return enhanced.strip()
    return (raw or "").strip()


def contact_line(resume: ResumeDocument) -> str:
    parts = [resume.email, resume.phone, resume.location]
    return CONTACT_SEPARATOR.join(p.strip() for p in parts if p and p.strip())


def languages_line(resume: ResumeDocument) -> str:
    entries = []
    for lang in resume.languages:
        if lang.proficiency:
            entries.append(f"{lang.language_name} ({lang.proficiency})")
        else:
            entries.append(lang.language_name)
    return ", ".join(entries)


def compose(resume: ResumeDocument, theme: str | None = None) -> str:
    """Build the complete HTML document for a resume.

    Args:
        resume: Resume data; list order is kept as given.
        theme: Overrides ``resume.template`` when provided.

    Returns:
        HTML markup with the theme's stylesheet inlined.
    """
    theme_name = resolve_theme(theme if theme is not None else resume.template)
    template = _environment().get_template("resume.html")
    return template.render(
        resume=resume,
        css=Markup(_theme_css(theme_name)),
        contact_line=contact_line(resume),
        objective=_prefer_enhanced(
            resume.enhanced_career_objective, resume.career_objective
        ),
        summary=_prefer_enhanced(
            resume.enhanced_professional_summary, resume.professional_summary
        ),
        languages_line=languages_line(resume),
    )
