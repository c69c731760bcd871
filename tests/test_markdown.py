"""Tests for Markdown resume rendering."""

from jobtrack.export.markdown import render_markdown, save_markdown


class TestRenderMarkdown:
    def test_header_and_contact(self, base_resume):
        md = render_markdown(base_resume)
        lines = md.splitlines()
        assert lines[0] == "# Alex Rivera"
        assert lines[2] == (
            "alex.rivera@example.com | 555-555-0123 | Austin, TX | "
            "https://linkedin.com/in/alexrivera | https://alexrivera.dev"
        )

    def test_derived_sections_in_order(self, base_resume):
        md = render_markdown(base_resume)
        headings = [line for line in md.splitlines() if line.startswith("## ")]
        assert headings == [
            "## Summary",
            "## Skills",
            "## Experience",
            "## Education",
            "## Projects",
        ]
        assert "Senior Software Engineer, BrightLeaf (2021-03 - Present)\n" in md
        assert "B.S. Computer Science, UT Austin (2018)\n" in md

    def test_explicit_sections(self, base_resume_with_sections):
        md = render_markdown(base_resume_with_sections)
        assert "## Work History\n\nBrightLeaf\nCobalt Labs\n" in md
        assert "## Experience" not in md

    def test_missing_contact_fields_are_skipped(self, base_resume):
        resume = base_resume.model_copy(
            update={"phone": None, "linkedin": None, "website": None, "location": None}
        )
        assert render_markdown(resume).splitlines()[2] == "alex.rivera@example.com"


def test_save_markdown_creates_parent(tmp_path):
    path = save_markdown("# Resume\n", tmp_path / "out" / "resume.md")
    assert path.read_text(encoding="utf-8") == "# Resume\n"
