"""Section layout of a resume, used to check structural fidelity."""

from __future__ import annotations

from jobtrack.models.resume import ResumeData, ResumeSection


def normalize(text: str) -> str:
    return text.strip().lower()


def resolve_sections(resume: ResumeData) -> list[ResumeSection]:
    """Return the resume's section layout.

    Explicit ``sections`` win when present and non-empty. Otherwise the
    layout is derived from the structured fields in a fixed order
    (Summary, Skills, Experience, Education, Projects), skipping fields
    that are empty. The derivation is deterministic so that validating
    the same resume twice always compares against the same layout.
    """
    if resume.sections:
        return list(resume.sections)

    sections: list[ResumeSection] = []

    summary = (resume.summary or "").strip()
    if summary:
        sections.append(ResumeSection(title="Summary", lines=[summary]))

    if resume.skills:
        sections.append(ResumeSection(title="Skills", lines=[", ".join(resume.skills)]))

    if resume.experience:
        lines: list[str] = []
        for exp in resume.experience:
            end = exp.end_date or "Present"
            lines.append(f"{exp.title}, {exp.company} ({exp.start_date} - {end})")
            lines.extend(exp.bullets)
        sections.append(ResumeSection(title="Experience", lines=lines))

    if resume.education:
        lines = []
        for edu in resume.education:
            line = edu.degree
            if edu.field:
                line += f" {edu.field}"
            line += f", {edu.institution}"
            if edu.graduation_date:
                line += f" ({edu.graduation_date})"
            lines.append(line)
        sections.append(ResumeSection(title="Education", lines=lines))

    if resume.projects:
        lines = []
        for proj in resume.projects:
            header = f"{proj.name}: {proj.description}" if proj.description else proj.name
            lines.append(header)
            lines.extend(proj.bullets)
        sections.append(ResumeSection(title="Projects", lines=lines))

    return sections
