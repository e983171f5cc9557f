#!/usr/bin/env python3
"""
Resume Compilation CLI

Builds LaTeX from structured resume files, compiles LaTeX to PDF, and publishes
compiled PDFs to the local artifact store.

Commands:
    source    - Compile a LaTeX file to PDF
    build     - Generate LaTeX source from a YAML/JSON resume
    compile   - Full pipeline: resume file -> PDF -> artifact store -> signed URL
    fallback  - Encode a text file as a minimal plain-text PDF
    templates - List available document templates

Examples:\n

    compile_pdf.py source resume.tex -o resume.pdf          # Compile LaTeX

    compile_pdf.py build data/jane.yaml -o jane.tex         # Resume -> LaTeX

    compile_pdf.py compile data/jane.yaml                   # Full pipeline

    compile_pdf.py --set compiler.timeout_s=60 compile data/jane.yaml

    compile_pdf.py templates                                # List templates
"""

import os
import time
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumake.config import ResumakeConfig, load_config
from resumake.contexts.publishing import LocalArtifactStore, ResumePipeline, artifact_key
from resumake.contexts.publishing.logger import setup_publishing_logger
from resumake.contexts.rendering import LatexCompiler, encode_minimal_pdf
from resumake.contexts.rendering.logger import setup_rendering_logger
from resumake.contexts.templating import (
    DocumentTemplateLoader,
    InvalidResumeStructureError,
    load_resume_file,
)
from resumake.contexts.templating.logger import setup_templating_logger
from resumake.utils.logger import session_log_dir
from resumake.utils.timestamp import format_epoch

load_dotenv()


def log_dir_for(command: str) -> Path:
    return session_log_dir(Path(os.getenv("LOGS_PATH", "outs/logs")), command)


app = typer.Typer(
    help="Build, compile and publish resume PDFs",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="YAML config file (default: $RESUMAKE_CONFIG if set)",
        ),
    ] = None,
    overrides: Annotated[
        Optional[List[str]],
        typer.Option(
            "--set",
            help="Config override in dotlist form, e.g. compiler.num_passes=1 (repeatable)",
        ),
    ] = None,
):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    if config_file is None and os.getenv("RESUMAKE_CONFIG"):
        config_file = Path(os.getenv("RESUMAKE_CONFIG"))

    try:
        ctx.obj = load_config(config_file, overrides)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _load_document(resume_file: Path, template: Optional[str]):
    try:
        document = load_resume_file(resume_file)
    except (FileNotFoundError, InvalidResumeStructureError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    if template:
        document.template_id = template
    return document


@app.command("source")
def source_command(
    ctx: typer.Context,
    tex_file: Annotated[Path, typer.Argument(help="LaTeX source file to compile")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="PDF output path (default: alongside the .tex)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed compilation output"),
    ] = False,
):
    """
    Compile a LaTeX file to PDF.

    Examples:\n

        $ compile_pdf.py source resume.tex

        $ compile_pdf.py source resume.tex -o out/resume.pdf --verbose
    """
    config: ResumakeConfig = ctx.obj
    if not tex_file.exists():
        typer.secho(f"Error: TeX file not found: {tex_file}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    log_dir = log_dir_for("render")
    setup_rendering_logger(log_dir, config.compiler.compiler)

    typer.secho(f"\nCompiling: {tex_file}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Passes: {config.compiler.num_passes}")
    typer.echo("")

    compiler = LatexCompiler(config.compiler)
    pipeline = ResumePipeline(config, compiler=compiler)
    outcome = pipeline.compile_source(tex_file.read_text(encoding="utf-8"), tex_file.stem)

    if outcome.success:
        pdf_path = output or tex_file.with_suffix(".pdf")
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        pdf_path.write_bytes(outcome.pdf_bytes)
        typer.secho("✓ Compilation succeeded", fg=typer.colors.GREEN, bold=True)
        result = outcome.result
        typer.echo(f"  Warnings: {len(result.warnings)}")
        if verbose and result.warnings:
            for warning in result.warnings[:10]:
                typer.echo(f"  - {warning}")
        if result.page_count is not None:
            typer.echo(f"  Pages: {result.page_count}")
        typer.echo(f"  PDF: {pdf_path}")
    else:
        typer.secho(f"✗ {outcome.error}", fg=typer.colors.RED, bold=True)
        if outcome.details:
            typer.echo("\nDetails:")
            typer.echo(outcome.details)

    typer.echo(f"  Log: {log_dir / 'render.log'}")
    typer.echo("")
    compiler.janitor.flush()
    raise typer.Exit(code=0 if outcome.success else 1)


@app.command("build")
def build_command(
    ctx: typer.Context,
    resume_file: Annotated[Path, typer.Argument(help="Resume document (YAML or JSON)")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write LaTeX here instead of stdout"),
    ] = None,
    template: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Document template id (overrides the file)"),
    ] = None,
):
    """
    Generate LaTeX source from a structured resume.

    Examples:\n

        $ compile_pdf.py build data/jane.yaml

        $ compile_pdf.py build data/jane.json -t compact -o jane.tex
    """
    config: ResumakeConfig = ctx.obj
    setup_templating_logger(log_dir_for("build"), config.templates.templates_dir)

    document = _load_document(resume_file, template)
    pipeline = ResumePipeline(config, compiler=LatexCompiler(config.compiler))
    source = pipeline.build_source(document)

    if output is None:
        typer.echo(source)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source, encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN)


@app.command("compile")
def compile_command(
    ctx: typer.Context,
    resume_file: Annotated[Path, typer.Argument(help="Resume document (YAML or JSON)")],
    template: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Document template id (overrides the file)"),
    ] = None,
    reuse: Annotated[
        bool,
        typer.Option("--reuse", help="Re-sign the stored PDF instead of recompiling, if present"),
    ] = False,
):
    """
    Compile a resume through the full pipeline and publish it.

    Falls back to a plain-text PDF when LaTeX compilation fails.

    Examples:\n

        $ compile_pdf.py compile data/jane.yaml

        $ compile_pdf.py --set store.root=/tmp/pdfs compile data/jane.yaml
    """
    config: ResumakeConfig = ctx.obj
    log_dir = log_dir_for("publish")
    setup_publishing_logger(log_dir, config.store.root)

    document = _load_document(resume_file, template)
    typer.secho(f"\nCompiling: {document.title}", fg=typer.colors.BLUE, bold=True)

    store = LocalArtifactStore.from_config(config.store)
    compiler = LatexCompiler(config.compiler)
    pipeline = ResumePipeline(config, store=store, compiler=compiler)
    if reuse:
        document.artifact_key = document.artifact_key or artifact_key(document.owner_id, document.id)
    report = pipeline.compile_document(document, force=not reuse)
    compiler.janitor.flush()

    typer.echo("")
    if report.error:
        typer.secho(f"✗ {report.error}", fg=typer.colors.RED, bold=True)
        typer.echo(f"  {report.details}")
        raise typer.Exit(code=1)

    if report.used_fallback:
        typer.secho(
            "! LaTeX compilation failed, stored plain-text fallback",
            fg=typer.colors.YELLOW,
            bold=True,
        )
    elif report.cached:
        typer.secho("✓ Reused stored PDF", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("✓ Compilation succeeded", fg=typer.colors.GREEN, bold=True)

    expires = int(time.time()) + config.store.signed_url_ttl_s
    typer.echo(f"  Key: {report.storage_key}")
    typer.echo(f"  URL: {report.url}")
    typer.echo(f"  Expires: {format_epoch(expires)}")
    typer.echo(f"  Log: {log_dir / 'publish.log'}")
    typer.echo("")


@app.command("fallback")
def fallback_command(
    text_file: Annotated[Path, typer.Argument(help="Plain text file")],
    output: Annotated[Path, typer.Option("--output", "-o", help="PDF output path")],
):
    """
    Encode a text file as a single-page plain-text PDF (no LaTeX needed).

    Examples:\n

        $ compile_pdf.py fallback notes.txt -o notes.pdf
    """
    if not text_file.exists():
        typer.secho(f"Error: Text file not found: {text_file}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    pdf_bytes = encode_minimal_pdf(text_file.read_text(encoding="utf-8"))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(pdf_bytes)
    typer.secho(f"✓ Wrote {output} ({len(pdf_bytes)} bytes)", fg=typer.colors.GREEN)


@app.command("templates")
def templates_command(ctx: typer.Context):
    """List document templates available to `build` and `compile`."""
    config: ResumakeConfig = ctx.obj
    loader = DocumentTemplateLoader.from_config(config.templates)

    templates = loader.list_templates()
    typer.secho(f"\nTemplates in {loader.templates_dir}:", fg=typer.colors.BLUE, bold=True)
    for template_id in templates:
        marker = " (default)" if template_id == loader.default_template_id else ""
        typer.echo(f"  {template_id}{marker}")
    if not templates:
        typer.echo("  (none, the embedded template will be used)")
    typer.echo("")


if __name__ == "__main__":
    app()
