"""Render a resume to Markdown for copy-paste or preview."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment

from jobtrack.models.resume import ResumeData
from jobtrack.pipeline.sections import resolve_sections

RESUME_TEMPLATE = """\
# {{ resume.name }}

{{ contact | join(" | ") }}
{% for section in sections %}
## {{ section.title }}

{% for line in section.lines -%}
{{ line }}
{% endfor -%}
{% endfor %}"""

_env = Environment(trim_blocks=False, lstrip_blocks=False, keep_trailing_newline=True)


def render_markdown(resume: ResumeData) -> str:
    """Render the resume's contact header and sections as Markdown."""
    contact = [
        value
        for value in (
            resume.email,
            resume.phone,
            resume.location,
            resume.linkedin,
            resume.website,
        )
        if value
    ]
    template = _env.from_string(RESUME_TEMPLATE)
    return template.render(resume=resume, contact=contact, sections=resolve_sections(resume))


def save_markdown(content: str, output_path: str | Path) -> Path:
    """Save rendered Markdown to file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
