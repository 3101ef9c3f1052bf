"""
Resume Architect command line.

Commands:
    extract     - Show the structured data found in an uploaded résumé
    render      - Print the Harvard-format markdown for a résumé
    analyze     - Score a résumé against a job description
    improve     - Rewrite a résumé for a job description (template fallback)
    export      - Write the résumé as .docx or print-ready .html
    forget-key  - Remove the stored API key

Usage:
    resume-architect extract resume.pdf --json
    resume-architect analyze resume.docx --job job.txt
    resume-architect export resume.pdf --format docx --improve --job job.txt --out build/
"""

import time
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

import config
from analyzer_llm import analyze_resume
from blob_server import publish_blob, revoke_blob
from credentials import default_store
from errors import ResumeError
from exporter import backend_for, download_filename, export_resume
from extractor import load_resume, read_upload
from generator_llm import generate_improved_resume
from generator_rule import create_harvard_template
from schema_resume import score_band

app = typer.Typer(
    help="Build ATS-optimized résumés from an uploaded document",
    add_completion=False,
    invoke_without_command=True,
)

ResumeArg = Annotated[
    Path,
    typer.Argument(help="Résumé file (.pdf, .docx, .txt or .md)"),
]
JobOpt = Annotated[
    Optional[Path],
    typer.Option("--job", "-j", help="Text file with the job description"),
]


def _ask_key(text: str) -> str:
    try:
        return typer.prompt(text, hide_input=True, default="", show_default=False)
    except typer.Abort:
        return ""


def _fail(error: ResumeError) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


def _job_text(job: Optional[Path]) -> str:
    if job is None:
        return ""
    try:
        return read_upload(job)
    except ResumeError as e:
        _fail(e)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
):
    """Show help by default when no command is provided."""
    config.setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("extract")
def extract_command(
    resume: ResumeArg,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full record as JSON")] = False,
):
    try:
        record = load_resume(resume)
    except ResumeError as e:
        _fail(e)

    if as_json:
        typer.echo(record.model_dump_json(indent=2))
        return

    info = record.personal_info
    typer.echo(f"Name:       {info.first_name} {info.last_name}".rstrip())
    typer.echo(f"Email:      {info.email}")
    typer.echo(f"Phone:      {info.phone}")
    typer.echo(f"Experience: {sum(1 for j in record.experience if j.company)} entries")
    typer.echo(f"Education:  {sum(1 for e in record.education if e.institution)} entries")
    typer.echo(f"Skills:     {', '.join(record.skills)}")


@app.command("render")
def render_command(resume: ResumeArg):
    try:
        record = load_resume(resume)
    except ResumeError as e:
        _fail(e)
    typer.echo(create_harvard_template(record))


@app.command("analyze")
def analyze_command(resume: ResumeArg, job: JobOpt = None):
    try:
        result = analyze_resume(read_upload(resume), _job_text(job), prompt=_ask_key)
    except ResumeError as e:
        _fail(e)

    typer.echo(f"ATS score: {result.score}/100 ({score_band(result.score)})")
    s = result.suggestions
    typer.echo(f"Keywords found:   {', '.join(s.keywords.found) or '-'}")
    typer.echo(f"Keywords missing: {', '.join(s.keywords.missing) or '-'}")
    for name in ("structure", "formatting", "content"):
        category = getattr(s, name)
        for issue in category.issues:
            typer.echo(f"[{name}] issue: {issue}")
        for tip in category.recommendations:
            typer.echo(f"[{name}] recommendation: {tip}")


@app.command("improve")
def improve_command(resume: ResumeArg, job: JobOpt = None):
    try:
        record = load_resume(resume)
    except ResumeError as e:
        _fail(e)
    typer.echo(generate_improved_resume(record, _job_text(job), prompt=_ask_key))


@app.command("export")
def export_command(
    resume: ResumeArg,
    file_format: Annotated[
        str, typer.Option("--format", "-f", help="docx, html or pdf (print-ready html)")
    ] = "docx",
    out: Annotated[Path, typer.Option("--out", "-o", help="Output directory")] = Path("."),
    improve: Annotated[bool, typer.Option("--improve", help="Rewrite with AI before export")] = False,
    job: JobOpt = None,
    serve: Annotated[bool, typer.Option("--serve", help="Also publish a local download link")] = False,
):
    try:
        record = load_resume(resume)
        template = (
            generate_improved_resume(record, _job_text(job), prompt=_ask_key) if improve else ""
        )
        backend = backend_for(file_format)
        blob = export_resume(record, backend, template)
    except ResumeError as e:
        _fail(e)

    filename = download_filename(record, blob.extension)
    out.mkdir(parents=True, exist_ok=True)
    target = out / filename
    target.write_bytes(blob.content)
    typer.echo(f"Wrote {target} ({blob.size} bytes)")

    if serve:
        url = publish_blob(blob, filename)
        typer.echo(f"Download: {url}  (Ctrl+C to revoke)")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            revoke_blob()


@app.command("forget-key")
def forget_key_command():
    default_store().clear()
    typer.echo("Stored API key removed.")


if __name__ == "__main__":
    app()
