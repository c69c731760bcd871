"""Data models for the job application tracker."""

from jobtrack.models.application import (
    STATUS_LABELS,
    Application,
    ApplicationPage,
    BaseResume,
    ApplicationStatus,
    JobPosting,
    ResumeVersion,
)
from jobtrack.models.resume import (
    ResumeData,
    ResumeEducation,
    ResumeExperience,
    ResumeProject,
    ResumeSection,
)
from jobtrack.models.tailoring import (
    TailoredCandidate,
    TailoredExperience,
    TailoredProject,
    TailoringFailure,
    ValidationVerdict,
)

__all__ = [
    "STATUS_LABELS",
    "Application",
    "ApplicationPage",
    "ApplicationStatus",
    "BaseResume",
    "JobPosting",
    "ResumeData",
    "ResumeEducation",
    "ResumeExperience",
    "ResumeProject",
    "ResumeSection",
    "ResumeVersion",
    "TailoredCandidate",
    "TailoredExperience",
    "TailoredProject",
    "TailoringFailure",
    "ValidationVerdict",
]
