"""Prompt templates for resume enhancement and scoring."""

from __future__ import annotations

ENHANCEMENT_KEYS: tuple[str, ...] = (
    "enhancedCareerObjective",
    "enhancedProfessionalSummary",
    "enhancedSkills",
    "enhancedProjects",
    "enhancedAchievements",
)

SCORING_KEYS: tuple[str, ...] = (
    "score",
    "feedback",
    "strengths",
    "improvements",
    "actionItems",
)

JSON_ONLY_INSTRUCTION = (
    "IMPORTANT: Return ONLY valid JSON, no additional text before or after the JSON object."
)

ENHANCEMENT_PROMPT = """\
You are a professional resume writing expert specializing in helping fresh graduates and college students.

Your task is to rewrite and improve the following resume content to sound more professional, concise,
and impactful. Make the content more compelling while keeping the meaning intact.

Focus on:
- Using strong action verbs
- Quantifying achievements where possible
- Making statements more concise and impactful
- Ensuring proper grammar and professional tone
- Highlighting relevant skills and experiences

Resume Content:
{combined_text}

Provide the enhanced content as a single JSON object with exactly these keys:
{{
  "enhancedCareerObjective": "An improved, professional career objective statement",
  "enhancedProfessionalSummary": "An improved professional summary highlighting key strengths",
  "enhancedSkills": "Professionally phrased skills section",
  "enhancedProjects": "Improved project descriptions with impact and results",
  "enhancedAchievements": "Improved achievements with quantified results"
}}

{json_only}
"""

SCORING_PROMPT = """\
You are a resume evaluation expert with experience in recruiting for tech companies.

Analyze the following resume content for a fresh graduate/college student and provide a comprehensive evaluation.

Consider these criteria:
- Content quality and relevance (30 points)
- Professional presentation and formatting (20 points)
- Skill demonstration and technical knowledge (25 points)
- Project descriptions and impact (15 points)
- Overall marketability for entry-level positions (10 points)

Resume Content:
{combined_text}

Provide the evaluation as a single JSON object with exactly these keys:
{{
  "score": 85,
  "feedback": "Overall assessment and key points",
  "strengths": ["Strength 1", "Strength 2", "Strength 3"],
  "improvements": ["Area to improve 1", "Area to improve 2", "Area to improve 3"],
  "actionItems": ["Specific action 1", "Specific action 2", "Specific action 3"]
}}

The score must be a number from 0 to 100.
{json_only}
"""


def build_enhancement_prompt(combined_text: str) -> str:
    return ENHANCEMENT_PROMPT.format(combined_text=combined_text, json_only=JSON_ONLY_INSTRUCTION)


def build_scoring_prompt(combined_text: str) -> str:
    return SCORING_PROMPT.format(combined_text=combined_text, json_only=JSON_ONLY_INSTRUCTION)
