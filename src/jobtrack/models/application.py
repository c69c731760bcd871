"""Pydantic models for tracked job applications and their resume versions."""

from __future__ import annotations

import hashlib
import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from jobtrack.models.resume import CamelModel, ResumeData


class ApplicationStatus(str, Enum):
    SAVED = "saved"
    APPLIED = "applied"
    PHONE_SCREEN = "phone_screen"
    INTERVIEW = "interview"
    OFFER = "offer"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


STATUS_LABELS: dict[ApplicationStatus, str] = {
    ApplicationStatus.SAVED: "Saved",
    ApplicationStatus.APPLIED: "Applied",
    ApplicationStatus.PHONE_SCREEN: "Phone Screen",
    ApplicationStatus.INTERVIEW: "Interview",
    ApplicationStatus.OFFER: "Offer",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.WITHDRAWN: "Withdrawn",
}


def description_hash(description: str) -> str:
    """Short SHA-256 fingerprint used to spot reposted or edited descriptions."""
    return hashlib.sha256(description.encode("utf-8")).hexdigest()[:16]


class JobPosting(CamelModel):
    """A job posting as captured by the browser extension or entered by hand."""

    title: str = Field(min_length=1)
    company_name: str = Field(min_length=1)
    location: str | None = None
    description: str
    url: str | None = None
    salary: str | None = None
    source: str | None = None

    @field_validator("url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            if not value.startswith(("http://", "https://")):
                raise ValueError(f"Invalid job posting URL: {value}")
        return value


class Application(JobPosting):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    description_hash: str = ""
    status: ApplicationStatus = ApplicationStatus.SAVED
    notes: str | None = None
    applied_at: datetime | None = None
    applied_with_resume_id: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]


class BaseResume(CamelModel):
    """A named base resume in the user's library. At most one is the default."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    name: str = Field(min_length=1)
    content: ResumeData
    is_default: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class ResumeVersion(CamelModel):
    """One generated tailored resume for an application."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    application_id: str
    content: ResumeData
    keywords: list[str] = Field(default_factory=list)
    prompt_config: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)


class ApplicationPage(CamelModel):
    items: list[Application]
    total: int
    page: int
    page_size: int
    has_more: bool
