"""Exception hierarchy for the resume builder."""

from __future__ import annotations


class ResumeBuilderError(Exception):
    """Base class for all resume builder failures."""

    http_status: int = 500


class ConfigError(ResumeBuilderError, ValueError):
    """Invalid configuration value."""


class ResumeNotFound(ResumeBuilderError):
    http_status = 404

    def __init__(self, resume_id: int):
        super().__init__(f"Resume not found with ID: {resume_id}")
        self.resume_id = resume_id


class RateLimitExceeded(ResumeBuilderError):
    """Admission to the AI service was denied; retry later."""

    http_status = 429


class AiServiceUnavailable(ResumeBuilderError):
    """The AI service failed after retries or rejected the request."""

    http_status = 503


class UnexpectedResponseShape(AiServiceUnavailable):
    """The AI service envelope is missing a required element."""


class RenderingFailed(ResumeBuilderError):
    """HTML to PDF conversion failed."""

    http_status = 500
