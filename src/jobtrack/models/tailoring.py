"""Pydantic models for tailored resume candidates and their verdicts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from jobtrack.models.resume import CamelModel, ResumeSection


class TailoredExperience(CamelModel):
    company: str
    title: str
    start_date: str
    end_date: str | None
    location: str | None
    bullets: list[str]


class TailoredProject(CamelModel):
    name: str
    description: str
    technologies: list[str]
    url: str | None
    bullets: list[str]


class TailoredCandidate(CamelModel):
    """Model output for one tailoring attempt. Every field is required."""

    summary: str
    skills: list[str]
    experience: list[TailoredExperience]
    projects: list[TailoredProject]
    sections: list[ResumeSection]
    keywords: list[str]  # extracted from the job description


class ValidationVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> ValidationVerdict:
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: str) -> ValidationVerdict:
        return cls(valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.valid


class TailoringFailure(BaseModel):
    """Both generation attempts produced a candidate that failed validation."""

    model_config = ConfigDict(frozen=True)

    reason: str  # reason from the last attempt only
    attempts: int = 2
