"""Tailoring orchestrator: quota check, generation, merge, persistence."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from jobtrack.clients.llm_client import LLMClient
from jobtrack.errors import (
    GenerationError,
    MissingBaseResumeError,
    QuotaExceededError,
    TailoringRejectedError,
)
from jobtrack.logging.cost_calculator import calculate_cost
from jobtrack.logging.models import UsageLog
from jobtrack.logging.usage_store import UsageStore
from jobtrack.models.application import Application, ResumeVersion
from jobtrack.models.resume import ResumeData, ResumeExperience, ResumeProject
from jobtrack.models.tailoring import TailoredCandidate, TailoringFailure
from jobtrack.pipeline.resume_tailor import ResumeTailor, generate_tailored_resume
from jobtrack.storage.application_store import ApplicationStore

logger = logging.getLogger(__name__)


@dataclass
class TailoringRun:
    """A successful tailoring request."""

    application: Application
    version: ResumeVersion
    attempts: int
    elapsed_seconds: float = 0.0


def merge_tailored(base: ResumeData, candidate: TailoredCandidate) -> ResumeData:
    """Combine tailored content with the base resume's contact info and education."""
    return ResumeData(
        name=base.name,
        email=base.email,
        phone=base.phone,
        location=base.location,
        linkedin=base.linkedin,
        website=base.website,
        summary=candidate.summary,
        skills=list(candidate.skills),
        experience=[ResumeExperience(**exp.model_dump()) for exp in candidate.experience],
        education=list(base.education),
        projects=[ResumeProject(**proj.model_dump()) for proj in candidate.projects],
        sections=list(candidate.sections) or None,
    )


class TailoringOrchestrator:
    """Runs one tailoring request for a tracked application."""

    def __init__(
        self,
        llm: LLMClient,
        store: ApplicationStore,
        usage: UsageStore | None = None,
        *,
        model: str = "claude-sonnet-4-5-20250929",
        temperature: float = 0.3,
        max_tokens: int = 8192,
        generation_limit: int | None = None,
    ):
        self.llm = llm
        self.store = store
        self.usage = usage
        self.model = model
        self.generation_limit = generation_limit
        self.tailor = ResumeTailor(llm, model=model, temperature=temperature, max_tokens=max_tokens)

    async def run(
        self,
        user_id: str,
        application_id: str,
        *,
        resume_id: str | None = None,
        on_phase: Callable[[str, str], None] | None = None,
    ) -> TailoringRun:
        """Generate, validate and store a tailored resume for one application.

        Tailors the user's default base resume unless ``resume_id`` names
        another one from their library.

        Raises:
            ApplicationNotFoundError: unknown application for this user.
            MissingBaseResumeError: the user has no base resume yet.
            BaseResumeNotFoundError: ``resume_id`` is not one of the user's resumes.
            QuotaExceededError: the generation limit is used up.
            GenerationError: the model call failed; not retried here.
            TailoringRejectedError: both attempts failed validation.
        """
        start = time.monotonic()

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        application = self.store.get_application(user_id, application_id)
        if resume_id is not None:
            entry = self.store.get_base_resume(user_id, resume_id)
        else:
            entry = self.store.get_default_base_resume(user_id)
        if entry is None:
            raise MissingBaseResumeError()
        base = entry.content

        if self.generation_limit is not None:
            used = self.store.count_resume_versions(user_id)
            if used >= self.generation_limit:
                raise QuotaExceededError(used, self.generation_limit)

        attempts = 0

        async def _generate(prompt: str, strict: bool) -> TailoredCandidate:
            nonlocal attempts
            attempts += 1
            _notify("generate", f"Generating tailored resume (attempt {attempts})")
            return await self.tailor.generate(prompt, strict)

        logger.info(
            "Tailoring resume for %s at %s", application.title, application.company_name
        )
        self.llm.get_token_summary()  # drop usage left over from earlier calls
        try:
            result = await generate_tailored_resume(base, application, _generate)
        except GenerationError as e:
            self._log_usage(user_id, application, attempts, start, success=False, error=str(e))
            raise

        if isinstance(result, TailoringFailure):
            self._log_usage(
                user_id, application, attempts, start, success=False, error=result.reason
            )
            raise TailoringRejectedError(result.reason)

        _notify("save", "Saving resume version")
        version = ResumeVersion(
            application_id=application.id,
            content=merge_tailored(base, result),
            keywords=list(result.keywords),
            prompt_config={
                "model": self.model,
                "base_resume_id": entry.id,
                "timestamp": datetime.now().isoformat(),
                "attempts": attempts,
            },
        )
        self.store.add_resume_version(version)
        elapsed = self._log_usage(user_id, application, attempts, start, success=True)

        _notify("done", f"Done in {elapsed:.1f}s")
        return TailoringRun(
            application=application,
            version=version,
            attempts=attempts,
            elapsed_seconds=elapsed,
        )

    def _log_usage(
        self,
        user_id: str,
        application: Application,
        attempts: int,
        start: float,
        *,
        success: bool,
        error: str | None = None,
    ) -> float:
        elapsed = time.monotonic() - start
        tokens = self.llm.get_token_summary()
        if self.usage is not None:
            self.usage.save_log(
                UsageLog(
                    user_id=user_id,
                    application_id=application.id,
                    company_name=application.company_name,
                    job_title=application.title,
                    attempts=attempts,
                    elapsed_seconds=elapsed,
                    total_input_tokens=tokens["input"],
                    total_output_tokens=tokens["output"],
                    estimated_cost_usd=calculate_cost(tokens["calls"]),
                    model=self.model,
                    success=success,
                    error_message=error,
                )
            )
        return elapsed
