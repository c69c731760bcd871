"""Pydantic models for the user's base resume."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts both camelCase (stored JSON, extension payloads) and snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResumeExperience(CamelModel):
    company: str
    title: str
    start_date: str
    end_date: str | None = None  # None = current position
    location: str | None = None
    bullets: list[str] = Field(default_factory=list)


class ResumeEducation(CamelModel):
    institution: str
    degree: str
    field: str | None = None
    graduation_date: str | None = None
    gpa: str | None = None


class ResumeProject(CamelModel):
    name: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None
    bullets: list[str] = Field(default_factory=list)


class ResumeSection(CamelModel):
    title: str
    lines: list[str] = Field(default_factory=list)


class ResumeData(CamelModel):
    """A full resume: the user's base resume or a merged tailored version."""

    name: str
    email: str
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    website: str | None = None
    summary: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience: list[ResumeExperience] = Field(default_factory=list)
    education: list[ResumeEducation] = Field(default_factory=list)
    projects: list[ResumeProject] = Field(default_factory=list)
    sections: list[ResumeSection] | None = None  # original layout, when known
