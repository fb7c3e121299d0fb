"""Resume composition and PDF export."""
from resume_builder.export.composer import AVAILABLE_THEMES, compose, resolve_theme
from resume_builder.export.pdf_renderer import render_pdf, wrap_document

__all__ = ["compose", "render_pdf", "resolve_theme", "wrap_document", "AVAILABLE_THEMES"]
