"""Fact-preservation checks for tailored resume candidates.

A candidate is accepted only if it is non-degenerate, keeps the base
resume's section layout, invents no employers or projects, and engages
with the target job's keywords. Checks run in a fixed order and the first
failure decides the verdict.
"""

from __future__ import annotations

from jobtrack.models.resume import ResumeData
from jobtrack.models.tailoring import TailoredCandidate, ValidationVerdict
from jobtrack.pipeline.sections import normalize, resolve_sections

MIN_KEYWORD_MATCHES = 3


def validate(base: ResumeData, candidate: TailoredCandidate) -> ValidationVerdict:
    """Decide whether ``candidate`` is a faithful rewrite of ``base``."""
    if not candidate.summary.strip():
        return ValidationVerdict.fail("Missing summary")
    if not candidate.skills:
        return ValidationVerdict.fail("Missing skills")
    if not candidate.keywords:
        return ValidationVerdict.fail("Missing keywords")

    base_sections = resolve_sections(base)
    if base_sections:
        if not candidate.sections:
            return ValidationVerdict.fail("Missing sections")
        if len(candidate.sections) != len(base_sections):
            return ValidationVerdict.fail("Section count changed")
        for expected, actual in zip(base_sections, candidate.sections):
            if normalize(actual.title) != normalize(expected.title):
                return ValidationVerdict.fail(f"Section title changed: {expected.title}")
            if len(actual.lines) != len(expected.lines):
                return ValidationVerdict.fail(f"Section line count changed: {expected.title}")

    if len(candidate.experience) != len(base.experience):
        return ValidationVerdict.fail("Experience count changed")

    base_companies = {normalize(exp.company) for exp in base.experience}
    for exp in candidate.experience:
        if normalize(exp.company) not in base_companies:
            return ValidationVerdict.fail(f"Unknown company: {exp.company}")

    base_projects = {normalize(proj.name) for proj in base.projects}
    if not base_projects and candidate.projects:
        return ValidationVerdict.fail("Projects added without a base project")
    for proj in candidate.projects:
        if normalize(proj.name) not in base_projects:
            return ValidationVerdict.fail(f"Unknown project: {proj.name}")

    corpus = _search_corpus(candidate)
    matched = sum(1 for kw in candidate.keywords if kw.lower() in corpus)
    if matched < min(MIN_KEYWORD_MATCHES, len(candidate.keywords)):
        return ValidationVerdict.fail("Low keyword coverage")

    return ValidationVerdict.ok()


def _search_corpus(candidate: TailoredCandidate) -> str:
    parts = [candidate.summary, *candidate.skills]
    for exp in candidate.experience:
        parts.extend(exp.bullets)
    for proj in candidate.projects:
        parts.append(proj.description)
        parts.extend(proj.bullets)
    for section in candidate.sections:
        parts.extend(section.lines)
    return "\n".join(parts).lower()
