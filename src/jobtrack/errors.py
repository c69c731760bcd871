"""Exception hierarchy shared by the pipeline, storage and CLI."""

from __future__ import annotations


class JobtrackError(Exception):
    """Base class for errors the CLI reports without a traceback."""


class GenerationError(JobtrackError):
    """The generation collaborator could not produce a structured candidate."""


class TailoringRejectedError(JobtrackError):
    """Both tailoring attempts failed validation."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to generate a valid tailored resume: {reason}")


class MissingBaseResumeError(JobtrackError):
    def __init__(self) -> None:
        super().__init__("No base resume found. Please upload your resume first.")


class QuotaExceededError(JobtrackError):
    def __init__(self, used: int, limit: int):
        self.used = used
        self.limit = limit
        super().__init__(f"Generation limit reached ({used}/{limit})")


class ApplicationNotFoundError(JobtrackError):
    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Application not found: {application_id}")


class DuplicateApplicationError(JobtrackError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Application already exists for this job posting: {url}")


class BaseResumeNotFoundError(JobtrackError):
    def __init__(self, resume_id: str):
        self.resume_id = resume_id
        super().__init__(f"Base resume not found: {resume_id}")
