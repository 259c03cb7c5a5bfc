#!/usr/bin/env python3
"""
Resume Rendering CLI

Drives the preview, client export, and server export backends from a JSON
or YAML document file.

Commands:
    preview       - Estimate page count and optionally write the preview page
    export-client - Rasterized PDF export (headless Chromium + Pillow)
    export-server - Native print PDF export (headless Chromium)
    export-text   - Plain-text export
    templates     - List registered templates
    validate      - Check an exported PDF against its document
    history       - Show recent export events
    serve         - Run the export API

Examples:\n

    render_resume.py preview data/ada.json                       # Page estimate

    render_resume.py preview data/ada.json --template modern -o preview.html

    render_resume.py export-server data/ada.json --filename ada   # outs/results/<today>/ada.pdf

    render_resume.py validate data/ada.json outs/results/2026-10-18/ada.pdf
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from dotenv import load_dotenv
from typing_extensions import Annotated

from quire.contexts.rendering import (
    ApproximateMeasurementSurface,
    BrowserMeasurementSurface,
    ClientExporter,
    ExportError,
    PreviewSession,
    export_pdf_bytes,
    validate_export,
)
from quire.contexts.rendering.logger import setup_rendering_logger
from quire.contexts.templating import export_text, load_document
from quire.contexts.templating.exceptions import InvalidDocumentStructureError
from quire.contexts.templating.template_registry import get_registry
from quire.utils.event_logging import get_recent_events, last_export_outcome
from quire.utils.timestamp import format_timestamp, now, today

load_dotenv()
LOGS_PATH = Path(os.getenv("QUIRE_LOGS_PATH", "outs/logs"))
RESULTS_PATH = Path(os.getenv("QUIRE_RESULTS_PATH", "outs/results"))

app = typer.Typer(
    help="Preview and export resume documents",
    add_completion=False,
    invoke_without_command=True,
)

DocumentArgument = Annotated[
    Path,
    typer.Argument(help="Document file (.json or .yaml)", exists=True, dir_okay=False),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load(path: Path):
    try:
        return load_document(path)
    except (FileNotFoundError, InvalidDocumentStructureError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _start_session_log(backend: str) -> Path:
    log_dir = LOGS_PATH / f"{backend}_{now()}"
    setup_rendering_logger(log_dir, backend=backend)
    return log_dir


@app.command("preview")
def preview_command(
    document_path: DocumentArgument,
    template: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Override the document's template id"),
    ] = None,
    zoom: Annotated[
        float,
        typer.Option("--zoom", "-z", help="Preview zoom (0.5 to 1.5)", min=0.5, max=1.5),
    ] = 1.0,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the preview page to this HTML file"),
    ] = None,
    browser: Annotated[
        bool,
        typer.Option("--browser", "-b", help="Measure in headless Chromium instead of estimating"),
    ] = False,
):
    """
    Estimate how many pages a document occupies.

    Examples:\n

        $ render_resume.py preview data/ada.json

        $ render_resume.py preview data/ada.json --browser --output preview.html
    """
    document = _load(document_path)
    surface_factory = BrowserMeasurementSurface if browser else ApproximateMeasurementSurface

    session = PreviewSession(document, surface_factory=surface_factory, include_webfont=browser)
    if template:
        session.set_template(template)
    session.set_zoom(zoom)
    estimate = session.flush()

    typer.secho(f"\nPreview: {document_path.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Template: {session.rendered.style.template_id}")
    typer.echo(f"  Pages: {estimate.page_count} ({estimate.confidence}, {estimate.surface_name})")
    typer.echo(f"  Content height: {estimate.content_height:.0f}px")
    if not estimate.measured:
        typer.secho("  Measurement failed; assumed one page", fg=typer.colors.YELLOW)
    for unit in estimate.clipped_units:
        typer.secho(f"  ! '{unit.label or unit.kind}' crosses a page edge", fg=typer.colors.YELLOW)

    if output:
        output.write_text(session.render_html(), encoding="utf-8")
        typer.echo(f"  HTML: {output}")
    typer.echo("")
    session.close()


@app.command("export-client")
def export_client_command(
    document_path: DocumentArgument,
    filename: Annotated[
        Optional[str],
        typer.Option("--filename", "-f", help="Output file name (defaults to the full name)"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Output directory (default: outs/results/<today>)"),
    ] = None,
):
    """
    Export a rasterized PDF rendered locally.

    Examples:\n

        $ render_resume.py export-client data/ada.json --filename ada
    """
    document = _load(document_path)
    log_dir = _start_session_log("client")

    try:
        result = ClientExporter().export(document, filename=filename, output_dir=output_dir)
    except ExportError as e:
        typer.secho(f"\n✗ Client export failed: {e.message}", fg=typer.colors.RED, bold=True)
        typer.echo(f"  Log: {log_dir / 'render.log'}\n")
        raise typer.Exit(code=1)

    typer.secho("\n✓ Client export succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  PDF: {result.output_path}")
    typer.echo(f"  Log: {log_dir / 'render.log'}\n")


@app.command("export-server")
def export_server_command(
    document_path: DocumentArgument,
    filename: Annotated[
        Optional[str],
        typer.Option("--filename", "-f", help="Output file name (defaults to the full name)"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Output directory (default: outs/results/<today>)"),
    ] = None,
):
    """
    Export a PDF printed natively by headless Chromium.

    Examples:\n

        $ render_resume.py export-server data/ada.json
    """
    document = _load(document_path)
    log_dir = _start_session_log("server")

    try:
        result = asyncio.run(export_pdf_bytes(document, filename))
    except ExportError as e:
        typer.secho(f"\n✗ Server export failed: {e.message}", fg=typer.colors.RED, bold=True)
        typer.echo(f"  Log: {log_dir / 'render.log'}\n")
        raise typer.Exit(code=1)

    output_dir = output_dir or RESULTS_PATH / today()
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / result.filename
    output_path.write_bytes(result.pdf_bytes)

    typer.secho("\n✓ Server export succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  PDF: {output_path}")
    typer.echo(f"  Log: {log_dir / 'render.log'}\n")


@app.command("export-text")
def export_text_command(
    document_path: DocumentArgument,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write to this file instead of stdout"),
    ] = None,
):
    """Export the document as plain text."""
    text = export_text(_load(document_path))
    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {output}")
    else:
        typer.echo(text)


@app.command("templates")
def templates_command():
    """List registered templates with their font and accent color."""
    registry = get_registry()
    typer.secho(f"\n{len(registry.template_ids())} templates", fg=typer.colors.BLUE, bold=True)
    for template_id in registry.template_ids():
        style = registry.resolve(template_id)
        marker = " (default)" if template_id == registry.default.template_id else ""
        typer.echo(f"  {template_id:<14} {style.font_stack:<40} {style.accent_color}{marker}")
    typer.echo("")


@app.command("validate")
def validate_command(
    document_path: DocumentArgument,
    pdf_path: Annotated[
        Path,
        typer.Argument(help="Exported PDF to check", exists=True, dir_okay=False),
    ],
    expected_pages: Annotated[
        Optional[int],
        typer.Option("--pages", "-p", help="Expected page count (default: preview estimate)", min=1),
    ] = None,
):
    """
    Validate an exported PDF against its document.

    Examples:\n

        $ render_resume.py validate data/ada.json outs/results/2026-10-18/ada.pdf --pages 1
    """
    document = _load(document_path)
    result = validate_export(document, pdf_path, expected_pages=expected_pages)

    if result.is_valid:
        typer.secho("\n✓ Validation passed", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  Page count: {result.page_count}")
    else:
        typer.secho("\n✗ Validation failed", fg=typer.colors.RED, bold=True)
        typer.echo(f"  Page count: {result.page_count}")
        for issue in result.issues:
            typer.secho(f"  - {issue}", fg=typer.colors.RED)
    if not result.diagnostics.has_text_layer:
        typer.echo("  No text layer: content checks skipped")
    typer.echo("")

    raise typer.Exit(code=0 if result.is_valid else 1)


@app.command("history")
def history_command(
    document_id: Annotated[
        Optional[str],
        typer.Argument(help="Only show events for this document id"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Number of events to show", min=1),
    ] = 10,
):
    """
    Show recent export events from the pipeline event log.

    Examples:\n

        $ render_resume.py history

        $ render_resume.py history resume-ada -n 5
    """
    events = get_recent_events(n=limit, document_id=document_id)
    if not events:
        typer.echo("No export events recorded")
        raise typer.Exit()

    typer.secho(f"\nLast {len(events)} event(s)", fg=typer.colors.BLUE, bold=True)
    for event in events:
        when = format_timestamp(event.get("timestamp", ""), relative=True)
        typer.echo(f"  {when:<10} {event['event_type']:<18} {event['document_id']:<16} {event['source']}")

    if document_id:
        outcome = last_export_outcome(document_id)
        if outcome is not None:
            typer.echo(f"\n  Last outcome: {outcome['event_type']}")
    typer.echo("")


@app.command("serve")
def serve_command(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Bind port")] = 8000,
):
    """Run the export API with uvicorn."""
    uvicorn.run("quire.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
