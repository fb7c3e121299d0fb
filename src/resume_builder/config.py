"""Application configuration loaded from config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TypeVar

import yaml

from resume_builder.errors import ConfigError

T = TypeVar("T")

DEFAULT_GEMINI_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
)


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ConfigError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class GeminiConfig:
    endpoint: str = DEFAULT_GEMINI_ENDPOINT
    api_key: str | None = None
    timeout: float = 30.0
    max_attempts: int = 3
    backoff_base: float = 1.0
    backoff_max: float = 8.0

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1, 300)
        _check_range("max_attempts", self.max_attempts, 1, 10)
        _check_range("backoff_base", self.backoff_base, 0, 60)
        if self.backoff_max < self.backoff_base:
            raise ConfigError("backoff_max must not be smaller than backoff_base")

    @property
    def resolved_api_key(self) -> str | None:
        return self.api_key or os.environ.get("GEMINI_API_KEY")


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int = 10
    window_seconds: float = 60.0

    def __post_init__(self) -> None:
        _check_range("max_requests", self.max_requests, 1, 10_000)
        _check_range("window_seconds", self.window_seconds, 1, 86_400)


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.resume-builder/resumes.db"
    usage_db_path: str = "~/.resume-builder/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()

    @property
    def resolved_usage_db_path(self) -> Path:
        return Path(self.usage_db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        gemini=_section(GeminiConfig, "gemini", raw),
        rate_limit=_section(RateLimitConfig, "rate_limit", raw),
        storage=_section(StorageConfig, "storage", raw),
    )


def _section(cls: type[T], name: str, raw: dict) -> T:
    values = raw.get(name) or {}
    if not isinstance(values, dict):
        raise ConfigError(f"{name} must be a mapping, got {type(values).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown {name} setting(s): {', '.join(map(str, unknown))}")
    return cls(**values)
