"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from jobtrack.clients.llm_client import LLMClient, LLMResponse
from jobtrack.models.application import JobPosting
from jobtrack.models.resume import (
    ResumeData,
    ResumeEducation,
    ResumeExperience,
    ResumeProject,
    ResumeSection,
)
from jobtrack.models.tailoring import TailoredCandidate
from jobtrack.pipeline.sections import resolve_sections
from jobtrack.storage.application_store import ApplicationStore


@pytest.fixture
def base_resume() -> ResumeData:
    return ResumeData(
        name="Alex Rivera",
        email="alex.rivera@example.com",
        phone="555-555-0123",
        location="Austin, TX",
        linkedin="https://linkedin.com/in/alexrivera",
        website="https://alexrivera.dev",
        summary="Full-stack engineer with 5+ years building web apps.",
        skills=["TypeScript", "React", "Node.js", "PostgreSQL", "AWS", "Docker", "GraphQL"],
        experience=[
            ResumeExperience(
                company="BrightLeaf",
                title="Senior Software Engineer",
                start_date="2021-03",
                end_date=None,
                location="Austin, TX",
                bullets=[
                    "Led migration from REST to GraphQL for internal APIs",
                    "Built CI pipelines to reduce deploy time",
                    "Optimized query performance for reporting dashboards",
                ],
            ),
            ResumeExperience(
                company="Cobalt Labs",
                title="Software Engineer",
                start_date="2019-01",
                end_date="2021-02",
                location="Remote",
                bullets=[
                    "Developed React UI for analytics platform",
                    "Implemented Node.js services for data ingestion",
                ],
            ),
        ],
        education=[
            ResumeEducation(
                institution="UT Austin",
                degree="B.S.",
                field="Computer Science",
                graduation_date="2018",
            )
        ],
        projects=[
            ResumeProject(
                name="FleetOps",
                description="Real-time vehicle tracking dashboard",
                technologies=["React", "Mapbox", "Node.js"],
                url="https://fleetops.example.com",
                bullets=["Built live map view", "Implemented alerting rules"],
            )
        ],
    )


@pytest.fixture
def base_resume_with_sections(base_resume) -> ResumeData:
    return base_resume.model_copy(
        update={
            "sections": [
                ResumeSection(title="Profile", lines=["Full-stack engineer."]),
                ResumeSection(title="Work History", lines=["BrightLeaf", "Cobalt Labs"]),
                ResumeSection(title="Technical Skills", lines=["TypeScript, React, Node.js"]),
            ]
        }
    )


@pytest.fixture
def job_posting() -> JobPosting:
    return JobPosting(
        title="Senior Full-Stack Engineer",
        company_name="Nimbus Health",
        location="Remote, US",
        description=(
            "We are looking for a senior full-stack engineer to build healthcare analytics tools.\n"
            "Requirements: TypeScript, React, Node.js, PostgreSQL, AWS. "
            "Experience with GraphQL and CI/CD."
        ),
        url="https://nimbus.example.com/jobs/42",
        source="linkedin",
    )


def candidate_payload(base: ResumeData, **overrides) -> dict:
    """JSON payload of a faithful tailored candidate for ``base``."""
    payload = {
        "summary": "Senior full-stack engineer shipping TypeScript, React and GraphQL products.",
        "skills": ["TypeScript", "React", "GraphQL", "Node.js", "PostgreSQL"],
        "experience": [
            {
                "company": exp.company,
                "title": exp.title,
                "startDate": exp.start_date,
                "endDate": exp.end_date,
                "location": exp.location,
                "bullets": list(exp.bullets),
            }
            for exp in base.experience
        ],
        "projects": [
            {
                "name": proj.name,
                "description": proj.description,
                "technologies": list(proj.technologies),
                "url": proj.url,
                "bullets": list(proj.bullets),
            }
            for proj in base.projects
        ],
        "sections": [
            {"title": section.title, "lines": list(section.lines)}
            for section in resolve_sections(base)
        ],
        "keywords": ["TypeScript", "React", "GraphQL", "PostgreSQL"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_candidate():
    """Factory: ``make_candidate(base, **field_overrides) -> TailoredCandidate``."""

    def _make(base: ResumeData, **overrides) -> TailoredCandidate:
        return TailoredCandidate.model_validate(candidate_payload(base, **overrides))

    return _make


@pytest.fixture
def make_payload():
    return candidate_payload


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value={})
    client.get_token_summary = MagicMock(
        return_value={"input": 0, "output": 0, "calls": []}
    )
    return client


@pytest.fixture
def store(tmp_path) -> ApplicationStore:
    return ApplicationStore(db_path=tmp_path / "jobtrack.db")
