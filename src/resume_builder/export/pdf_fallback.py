"""Fallback PDF renderer using fpdf2 (pure Python, no system deps)."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path

from fpdf import FPDF
from fpdf.enums import XPos, YPos

logger = logging.getLogger(__name__)

# Unicode-capable font search paths (Linux, macOS, Windows)
_UNICODE_FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

_BLOCK_TAG = re.compile(r"(</?(?:h[1-3]|p|li|ul|ol|div)(?:\s[^>]*)?>|<br\s*/?>)", re.IGNORECASE)
_TAG_NAME = re.compile(r"<(/?)([a-z0-9]+)", re.IGNORECASE)


def _find_unicode_font() -> str | None:
    for path in _UNICODE_FONT_PATHS:
        if Path(path).exists():
            return path
    return None


def html_to_pdf_fpdf2(html_content: str) -> bytes:
    """Lay out headings, paragraphs, list items and badges as plain PDF text."""
    body_match = re.search(r"<body[^>]*>(.*?)</body>", html_content, re.DOTALL | re.IGNORECASE)
    body = body_match.group(1) if body_match else html_content

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    font_name = "Helvetica"
    unicode_font = _find_unicode_font()
    if unicode_font:
        try:
            pdf.add_font("UnicodeFont", "", unicode_font)
            font_name = "UnicodeFont"
        except (OSError, RuntimeError):
            logger.warning("Failed to load font %s, using Helvetica", unicode_font)

    pdf.set_font(font_name, size=10)

    for line_type, text in _parse_html_to_lines(body):
        safe_text = _safe_text(text, pdf)
        if line_type == "h1":
            pdf.set_font_size(18)
            _write(pdf, 10, safe_text)
            pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
            pdf.ln(3)
            pdf.set_font_size(10)
        elif line_type == "h2":
            pdf.ln(3)
            pdf.set_font_size(13)
            _write(pdf, 8, safe_text)
            pdf.ln(1)
            pdf.set_font_size(10)
        elif line_type == "h3":
            pdf.set_font_size(11)
            _write(pdf, 7, safe_text)
            pdf.set_font_size(10)
        elif line_type == "bullet":
            _write(pdf, 6, f"  - {safe_text}")
        elif line_type == "text":
            _write(pdf, 6, safe_text)
        elif line_type == "break":
            pdf.ln(2)

    return bytes(pdf.output())


def _write(pdf: FPDF, height: float, text: str) -> None:
    pdf.multi_cell(0, height, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def _safe_text(text: str, pdf: FPDF) -> str:
    """Built-in fonts only cover latin-1; replace anything else."""
    if pdf.is_ttf_font:
        return text
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _parse_html_to_lines(body_html: str) -> list[tuple[str, str]]:
    """Parse simple HTML into (type, text) pairs."""
    # Inline badges read as one separated line
    body_html = re.sub(r"</span>\s*(?=<span)", "</span> | ", body_html)

    lines: list[tuple[str, str]] = []
    current = "text"
    for part in _BLOCK_TAG.split(body_html):
        if not part.strip():
            continue
        tag_match = _TAG_NAME.match(part) if _BLOCK_TAG.fullmatch(part) else None
        if tag_match:
            closing = tag_match.group(1) == "/"
            tag = tag_match.group(2).lower()
            if tag == "br":
                lines.append(("break", ""))
            elif closing:
                if tag in ("ul", "ol"):
                    lines.append(("break", ""))
                current = "text"
            elif tag in ("h1", "h2", "h3"):
                current = tag
            elif tag == "li":
                current = "bullet"
            else:
                current = "text"
        else:
            text = _strip_html(part)
            if text:
                lines.append((current, text))
    return lines


def _strip_html(text: str) -> str:
    text = re.sub(r"<[^>]+>", "", text)
    return " ".join(html.unescape(text).split())
