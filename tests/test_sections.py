"""Tests for resume section layout resolution."""

from jobtrack.models.resume import ResumeData, ResumeSection
from jobtrack.pipeline.sections import normalize, resolve_sections


class TestResolveSections:
    def test_explicit_sections_are_authoritative(self, base_resume_with_sections):
        sections = resolve_sections(base_resume_with_sections)
        assert [s.title for s in sections] == ["Profile", "Work History", "Technical Skills"]

    def test_derived_order(self, base_resume):
        sections = resolve_sections(base_resume)
        assert [s.title for s in sections] == [
            "Summary",
            "Skills",
            "Experience",
            "Education",
            "Projects",
        ]

    def test_derived_lines(self, base_resume):
        by_title = {s.title: s.lines for s in resolve_sections(base_resume)}
        assert by_title["Summary"] == ["Full-stack engineer with 5+ years building web apps."]
        assert by_title["Skills"] == [
            "TypeScript, React, Node.js, PostgreSQL, AWS, Docker, GraphQL"
        ]
        # header + bullets for each entry
        assert len(by_title["Experience"]) == 4 + 3
        assert by_title["Experience"][0] == "Senior Software Engineer, BrightLeaf (2021-03 - Present)"
        assert by_title["Experience"][4] == "Software Engineer, Cobalt Labs (2019-01 - 2021-02)"
        assert by_title["Education"] == ["B.S. Computer Science, UT Austin (2018)"]
        assert by_title["Projects"] == [
            "FleetOps: Real-time vehicle tracking dashboard",
            "Built live map view",
            "Implemented alerting rules",
        ]

    def test_empty_fields_are_skipped(self):
        resume = ResumeData(name="A", email="a@example.com", summary="  ", skills=["Go"])
        assert [s.title for s in resolve_sections(resume)] == ["Skills"]

    def test_empty_explicit_sections_fall_back_to_derivation(self, base_resume):
        resume = base_resume.model_copy(update={"sections": []})
        assert resolve_sections(resume)[0].title == "Summary"

    def test_derivation_is_deterministic(self, base_resume):
        assert resolve_sections(base_resume) == resolve_sections(base_resume)

    def test_returns_a_copy(self, base_resume_with_sections):
        sections = resolve_sections(base_resume_with_sections)
        sections.append(ResumeSection(title="Extra"))
        assert len(base_resume_with_sections.sections) == 3


def test_normalize():
    assert normalize("  Work History \n") == "work history"
