"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from jobtrack.clients.llm_client import LLMClient
from jobtrack.config import AppConfig, load_config
from jobtrack.errors import JobtrackError
from jobtrack.export.markdown import render_markdown, save_markdown
from jobtrack.logging.usage_store import UsageStore
from jobtrack.models.application import (
    STATUS_LABELS,
    Application,
    ApplicationStatus,
    JobPosting,
)
from jobtrack.parsers.jd_parser import load_jd_file
from jobtrack.parsers.resume_parser import load_base_resume
from jobtrack.pipeline.orchestrator import TailoringOrchestrator
from jobtrack.storage.application_store import ApplicationStore

app = typer.Typer(
    name="jobtrack",
    help="Job application tracker with AI-tailored resumes",
    no_args_is_help=True,
)
console = Console()

USER_OPTION = typer.Option("local", "--user", "-u", help="User id that owns the data")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    config = load_config()
    level = "DEBUG" if verbose else config.logging.level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _store(config: AppConfig) -> ApplicationStore:
    return ApplicationStore(db_path=config.storage.resolved_db_path)


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _output_name(application: Application) -> str:
    name = f"{application.company_name}_{application.title}"
    stem = re.sub(r"[^\w.-]+", "_", name).strip("_.")
    return f"{stem or 'resume'}.md"


@app.command()
def profile(
    resume: Path = typer.Argument(help="Base resume file (JSON or YAML)"),
    name: str = typer.Option(None, "--name", "-n", help="Resume name (default: file name)"),
    default: bool = typer.Option(False, "--default", help="Make this the default resume"),
    user: str = USER_OPTION,
) -> None:
    """Add a base resume to your library."""
    if not resume.exists():
        _fail(f"Resume file not found: {resume}")
    try:
        data = load_base_resume(resume)
    except ValueError as e:
        _fail(str(e))

    entry = _store(load_config()).add_base_resume(
        user, name or resume.stem, data, make_default=default
    )
    console.print(
        f"[green]Base resume saved:[/green] {entry.name} "
        f"({len(data.experience)} positions, {len(data.projects)} projects, "
        f"{len(data.skills)} skills)" + (" [bold]default[/bold]" if entry.is_default else "")
    )
    console.print(f"[dim]id: {entry.id}[/dim]")


@app.command()
def resumes(user: str = USER_OPTION) -> None:
    """List the base resumes in your library."""
    entries = _store(load_config()).list_base_resumes(user)
    if not entries:
        console.print("[yellow]No base resumes yet.[/yellow]")
        return

    table = Table(title=f"Base resumes ({len(entries)})")
    table.add_column("id", style="dim", no_wrap=True)
    table.add_column("Name")
    table.add_column("Default")
    table.add_column("Added")
    for entry in entries:
        table.add_row(
            entry.id,
            entry.name,
            "*" if entry.is_default else "",
            entry.created_at.strftime("%Y-%m-%d"),
        )
    console.print(table)


@app.command("default-resume")
def default_resume(
    resume_id: str = typer.Argument(help="Base resume id"),
    user: str = USER_OPTION,
) -> None:
    """Make a base resume the default used for tailoring."""
    try:
        entry = _store(load_config()).set_default_base_resume(user, resume_id)
    except JobtrackError as e:
        _fail(str(e))
    console.print(f"[green]Default resume: {entry.name}[/green]")


@app.command("remove-resume")
def remove_resume(
    resume_id: str = typer.Argument(help="Base resume id"),
    user: str = USER_OPTION,
) -> None:
    """Delete a base resume from your library."""
    try:
        _store(load_config()).delete_base_resume(user, resume_id)
    except JobtrackError as e:
        _fail(str(e))
    console.print("[green]Base resume deleted.[/green]")


@app.command()
def add(
    title: str = typer.Option(..., "--title", help="Job title"),
    company: str = typer.Option(..., "--company", "-c", help="Company name"),
    jd: Path = typer.Option(..., "--jd", help="Job description text file"),
    url: str = typer.Option(None, "--url", help="Job posting URL"),
    location: str = typer.Option(None, "--location", help="Job location"),
    salary: str = typer.Option(None, "--salary", help="Salary range"),
    source: str = typer.Option(None, "--source", help="Where the posting was found"),
    user: str = USER_OPTION,
) -> None:
    """Track a new job application."""
    if not jd.exists():
        _fail(f"Job description file not found: {jd}")
    try:
        posting = JobPosting(
            title=title,
            company_name=company,
            location=location,
            description=load_jd_file(jd),
            url=url,
            salary=salary,
            source=source,
        )
        application = _store(load_config()).create_application(user, posting)
    except (ValueError, JobtrackError) as e:
        _fail(str(e))

    console.print(f"[green]Tracking {application.title} at {application.company_name}[/green]")
    console.print(f"[dim]id: {application.id}[/dim]")


@app.command("list")
def list_applications(
    status: ApplicationStatus = typer.Option(None, "--status", "-s", help="Filter by status"),
    page: int = typer.Option(1, "--page", min=1),
    user: str = USER_OPTION,
) -> None:
    """List tracked applications, newest first."""
    result = _store(load_config()).list_applications(user, status=status, page=page)
    if not result.items:
        console.print("[yellow]No applications yet.[/yellow]")
        return

    table = Table(title=f"Applications ({result.total})")
    table.add_column("id", style="dim", no_wrap=True)
    table.add_column("Company")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Added")
    for item in result.items:
        table.add_row(
            item.id,
            item.company_name,
            item.title,
            item.status_label,
            item.created_at.strftime("%Y-%m-%d"),
        )
    console.print(table)
    if result.has_more:
        console.print(f"[dim]More on page {result.page + 1}[/dim]")


@app.command()
def status(
    application_id: str = typer.Argument(help="Application id"),
    new_status: ApplicationStatus = typer.Argument(help="New status"),
    notes: str = typer.Option(None, "--notes", help="Notes to store with the application"),
    resume: str = typer.Option(
        None, "--resume", "-r", help="Base resume id the application was sent with"
    ),
    user: str = USER_OPTION,
) -> None:
    """Move an application to a new pipeline status."""
    try:
        updated = _store(load_config()).update_application(
            user, application_id, status=new_status, notes=notes, applied_with_resume_id=resume
        )
    except JobtrackError as e:
        _fail(str(e))
    console.print(
        f"[green]{updated.company_name} / {updated.title}: "
        f"{STATUS_LABELS[updated.status]}[/green]"
    )


@app.command()
def remove(
    application_id: str = typer.Argument(help="Application id"),
    user: str = USER_OPTION,
) -> None:
    """Delete an application and its resume versions."""
    try:
        _store(load_config()).delete_application(user, application_id)
    except JobtrackError as e:
        _fail(str(e))
    console.print("[green]Application deleted.[/green]")


@app.command()
def tailor(
    application_id: str = typer.Argument(help="Application id"),
    output: Path = typer.Option(None, "--output", "-o", help="Output file path (.md)"),
    resume: str = typer.Option(
        None, "--resume", "-r", help="Base resume id (default resume if omitted)"
    ),
    user: str = USER_OPTION,
) -> None:
    """Generate an AI-tailored resume for an application."""
    config = load_config()
    store = _store(config)
    orchestrator = TailoringOrchestrator(
        LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries),
        store,
        UsageStore(db_path=config.usage.resolved_db_path),
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
        generation_limit=config.usage.generation_limit,
    )

    with console.status("Tailoring resume...") as spinner:

        def on_phase(phase: str, detail: str) -> None:
            spinner.update(detail)

        try:
            result = asyncio.run(
                orchestrator.run(user, application_id, resume_id=resume, on_phase=on_phase)
            )
        except JobtrackError as e:
            _fail(str(e))

    content = result.version.content
    if output is None:
        output = Path("output") / _output_name(result.application)
    save_markdown(render_markdown(content), output)

    console.print(f"\n[green]Resume saved: {output}[/green]")
    console.print(
        Panel(
            f"Keywords: {', '.join(result.version.keywords)}\n"
            f"Attempts: {result.attempts}\n"
            f"Elapsed: {result.elapsed_seconds:.1f}s",
            title="Tailored resume",
        )
    )


@app.command()
def versions(
    application_id: str = typer.Argument(help="Application id"),
    user: str = USER_OPTION,
) -> None:
    """Show generated resume versions for an application."""
    store = _store(load_config())
    try:
        application = store.get_application(user, application_id)
    except JobtrackError as e:
        _fail(str(e))

    items = store.list_resume_versions(user, application.id)
    if not items:
        console.print("[yellow]No resume versions yet.[/yellow]")
        return
    for version in items:
        console.print(
            f"[bold]{version.id[:8]}[/bold] {version.created_at:%Y-%m-%d %H:%M} "
            f"[dim]{', '.join(version.keywords[:8])}[/dim]"
        )


@app.command()
def usage(user: str = USER_OPTION) -> None:
    """Show this month's generation usage and cost."""
    config = load_config()
    usage_store = UsageStore(db_path=config.usage.resolved_db_path)
    stats = usage_store.get_monthly_stats(user)
    total_cost = usage_store.get_total_cost(user)
    used = _store(config).count_resume_versions(user)
    limit = config.usage.generation_limit
    console.print(
        Panel(
            f"Generations: {used}" + (f" / {limit}" if limit is not None else "") + "\n"
            f"Runs this month: {stats['total_runs']} "
            f"(success {stats['success_rate']:.0f}%)\n"
            f"Tokens: {stats['total_input_tokens']} in / {stats['total_output_tokens']} out\n"
            f"Estimated cost: ${stats['total_cost_usd']:.4f} "
            f"(all time ${total_cost:.4f})",
            title=f"Usage {stats['month']}",
        )
    )


if __name__ == "__main__":
    app()
