"""Typer-based CLI for CodeFlow whole-project flowcharts."""

from __future__ import annotations

import logging
import webbrowser
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__, config
from .cli_config import config_app
from .config_manager import load_export_config, load_scan_policy
from .html_view import write_html
from .mermaid import unwrap_fenced
from .pipeline import generate_flow, write_flow
from .svg_export import RendererUnavailableError, export_svg

console = Console()

app = typer.Typer(
    help="🗺️  CodeFlow CLI — whole-project dependency flowcharts in Mermaid.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config_app, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"CodeFlow CLI v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """CodeFlow CLI: scan a source tree and draw its file-level dependency flow."""
    _configure_logging(verbose)


def _read_flow_file(flow_file: Path) -> str:
    if not flow_file.exists():
        console.print(f"[red]✗[/red] {flow_file.name} not found. Run [cyan]cflow generate[/cyan] first.")
        raise typer.Exit(1)
    text = unwrap_fenced(flow_file.read_text(encoding="utf-8"))
    if not text.strip():
        console.print(f"[red]✗[/red] No mermaid content found in {flow_file.name}")
        raise typer.Exit(1)
    return text


@app.command("generate")
def generate(
    project_path: Path = typer.Argument(
        Path("."), exists=True, file_okay=False, resolve_path=True, help="Root directory to scan."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help=f"Output file (default: <path>/{config.FLOW_FILE})."
    ),
    ignore: Optional[List[str]] = typer.Option(
        None, "--ignore", "-x", help="Extra path substring to skip (repeatable)."
    ),
):
    """🔎 Scan a project and write its Mermaid flowchart."""
    policy = load_scan_policy(extra_ignores=ignore or [])
    out_file = output or project_path / config.FLOW_FILE

    console.print(f"Scanning workspace: [cyan]{project_path}[/cyan]")
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting...", total=None)
        result = generate_flow(
            project_path,
            policy=policy,
            progress=lambda stage: progress.update(task, description=f"{stage}..."),
        )

    if result.is_empty:
        console.print("[yellow]⚠ No files found to analyze.[/yellow]")
        raise typer.Exit(1)

    write_flow(result, out_file)
    graph = result.graph
    console.print(f"[green]✓[/green] Wrote flow to [cyan]{out_file}[/cyan]")
    console.print(
        f"Files: {len(graph.files)} | Imports: {len(graph.file_edges())} | "
        f"External: {len(graph.externals)}"
    )
    for collision in graph.collisions:
        console.print(
            f"[yellow]⚠[/yellow] '{escape(collision.label)}' renamed to {collision.assigned_id} "
            f"(clashes with '{escape(collision.existing_label)}')"
        )


@app.command("export-svg")
def export_svg_command(
    project_path: Path = typer.Argument(
        Path("."), exists=True, file_okay=False, resolve_path=True, help="Directory holding the flow file."
    ),
    input_file: str = typer.Option(config.FLOW_FILE, "--input", "-i", help="Fenced Mermaid file to export."),
    output: str = typer.Option(config.SVG_FILE, "--output", "-o", help="SVG file to write."),
    max_text_size: Optional[int] = typer.Option(
        None, "--max-text-size", min=1, help="Mermaid maxTextSize (default from config)."
    ),
):
    """🖼️  Render the generated flowchart to SVG with the Mermaid CLI."""
    mermaid_text = _read_flow_file(project_path / input_file)
    export_cfg = load_export_config()

    try:
        result = export_svg(
            mermaid_text,
            project_path,
            svg_name=output,
            max_text_size=max_text_size or export_cfg["max_text_size"],
            timeout=export_cfg["timeout"],
        )
    except RendererUnavailableError as exc:
        console.print("[red]✗ Failed to run Mermaid CLI.[/red]")
        for attempt in exc.attempts:
            console.print(f"  [dim]{attempt.strategy}:[/dim] {attempt.reason}")
        console.print("Install it locally, for example:")
        console.print("  [cyan]npm install -D @mermaid-js/mermaid-cli[/cyan]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Generated SVG: [cyan]{result.svg_path}[/cyan] (via {result.strategy})")


@app.command("view")
def view(
    project_path: Path = typer.Argument(
        Path("."), exists=True, file_okay=False, resolve_path=True, help="Project root."
    ),
    input_file: str = typer.Option(config.FLOW_FILE, "--input", "-i", help="Fenced Mermaid file to show."),
    output: str = typer.Option(config.HTML_FILE, "--output", "-o", help="HTML file to write."),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="Open the page in a browser."),
):
    """👀 Write an HTML page rendering the flowchart and open it."""
    flow_file = project_path / input_file
    if flow_file.exists():
        mermaid_text = _read_flow_file(flow_file)
    else:
        result = generate_flow(project_path, policy=load_scan_policy())
        if result.is_empty:
            console.print("[yellow]⚠ No files found to analyze.[/yellow]")
            raise typer.Exit(1)
        mermaid_text = result.mermaid

    html_file = write_html(
        mermaid_text,
        project_path / output,
        title=f"Code Flowchart: {project_path.name}",
        max_text_size=load_export_config()["max_text_size"],
    )
    console.print(f"[green]✓[/green] Wrote viewer to [cyan]{html_file}[/cyan]")
    if open_browser:
        webbrowser.open(html_file.as_uri())


if __name__ == "__main__":
    app()
