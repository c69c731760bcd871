"""Resume Tailor: generates a job-specific rewrite of the base resume.

Generation is delegated to an injected ``generate(prompt, strict)``
coroutine. The first candidate that passes validation wins; a rejected
first attempt earns exactly one retry with a stricter instruction.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable

import anthropic
from pydantic import ValidationError

from jobtrack.clients.llm_client import DEFAULT_MODEL, LLMClient
from jobtrack.errors import GenerationError
from jobtrack.models.application import JobPosting
from jobtrack.models.resume import ResumeData
from jobtrack.models.tailoring import TailoredCandidate, TailoringFailure
from jobtrack.pipeline.sections import resolve_sections
from jobtrack.pipeline.validator import validate

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str, bool], Awaitable[TailoredCandidate]]

SYSTEM_PROMPT = """\
You are an expert ATS resume optimizer. You rewrite resumes to target a specific job \
while keeping every fact from the original.

Respond ONLY with a JSON object of this exact shape:
{
  "summary": "A 2-3 sentence professional summary tailored to the job",
  "skills": ["Skills reordered/filtered to match job requirements"],
  "experience": [
    {
      "company": "...",
      "title": "...",
      "startDate": "...",
      "endDate": "... or null",
      "location": "... or null",
      "bullets": ["Achievement bullets rewritten to emphasize relevant skills"]
    }
  ],
  "projects": [
    {
      "name": "...",
      "description": "...",
      "technologies": ["..."],
      "url": "... or null",
      "bullets": ["..."]
    }
  ],
  "sections": [
    {"title": "Section title", "lines": ["One entry per content line"]}
  ],
  "keywords": ["Keywords extracted from the job description"]
}"""

RETRY_STRICT_NOTE = """

STRICT MODE (previous attempt was rejected):
- Do NOT add or remove any experience entries, projects, or sections.
- Keep every company name, job title, start date and end date exactly as in the base resume.
- Keep every project name exactly as in the base resume.
- Keep every section title exactly as given and keep the same number of lines in each section.
- Only bullet wording, the summary, the order of skills, and the wording of section lines may change."""


def build_prompt(base: ResumeData, job: JobPosting | str) -> str:
    """Build the tailoring prompt for one base resume and target job."""
    if isinstance(job, str):
        job_block = job
    else:
        job_block = (
            f"Company: {job.company_name}\n"
            f"Title: {job.title}\n"
            f"Location: {job.location or 'Not specified'}\n\n"
            f"{job.description}"
        )

    layout = "\n".join(
        f"- {section.title} ({len(section.lines)} lines)" for section in resolve_sections(base)
    ) or "- (no fixed layout)"

    resume_json = json.dumps(
        base.model_dump(by_alias=True, exclude_none=True), ensure_ascii=False, indent=2
    )

    return f"""Given a base resume and job description, create a tailored version that:

1. Reorders skills to put the most relevant ones first
2. Rewrites experience bullets to emphasize matching skills and keywords
3. Creates a summary tailored to this specific role
4. Extracts key keywords from the job description
5. Rewrites the content lines of every section, keeping the section layout below

CRITICAL CONSTRAINTS:
- NEVER invent experience, companies, or projects that don't exist in the base resume
- NEVER fabricate metrics or numbers - only include quantifiable achievements if they exist in the original
- You may rephrase and reorder, but the underlying facts must remain truthful
- Focus on highlighting relevant existing experience, not creating new content

SECTION LAYOUT (same titles, same order, same number of lines):
{layout}

BASE RESUME:
{resume_json}

JOB DESCRIPTION:
{job_block}

Generate a tailored resume that will perform well in ATS systems while remaining completely truthful."""


async def generate_tailored_resume(
    base: ResumeData,
    job_description: JobPosting | str,
    generate: GenerateFn,
) -> TailoredCandidate | TailoringFailure:
    """Generate and validate a tailored resume in at most two attempts.

    A ``GenerationError`` raised by ``generate`` propagates unchanged and
    is never retried here. Only a candidate that fails validation triggers
    the strict second attempt; if that one fails too, its reason alone is
    reported.
    """
    prompt = build_prompt(base, job_description)

    candidate = await generate(prompt, False)
    verdict = validate(base, candidate)
    if verdict:
        return candidate
    logger.warning("Tailored resume rejected (attempt 1): %s", verdict.reason)

    candidate = await generate(prompt + RETRY_STRICT_NOTE, True)
    verdict = validate(base, candidate)
    if verdict:
        return candidate
    logger.warning("Tailored resume rejected (attempt 2): %s", verdict.reason)
    return TailoringFailure(reason=verdict.reason or "")


class ResumeTailor:
    """LLM-backed generation collaborator for ``generate_tailored_resume``."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_tokens: int = 8192,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, prompt: str, strict: bool) -> TailoredCandidate:
        """Ask the model for a candidate and coerce it into ``TailoredCandidate``."""
        logger.info("Generating tailored resume (strict=%s)", strict)
        try:
            data = await self.llm.generate_json(
                prompt=prompt,
                system=SYSTEM_PROMPT,
                model=self.model,
                temperature=0.0 if strict else self.temperature,
                max_tokens=self.max_tokens,
            )
        except ValueError as e:
            raise GenerationError(f"Model returned no usable JSON: {e}") from e
        except anthropic.APIError as e:
            raise GenerationError(f"Model call failed: {e}") from e

        if not isinstance(data, dict):
            raise GenerationError(f"Expected a JSON object from the model, got {type(data).__name__}")
        try:
            return TailoredCandidate.model_validate(data)
        except ValidationError as e:
            raise GenerationError(f"Model output does not match the tailored resume schema: {e}") from e
