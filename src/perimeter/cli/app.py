"""CLI application entry point for perimeter.

This module provides the main CLI interface using Typer.
"""

import json
import random
from pathlib import Path
from typing import Annotated

import structlog
import typer

from perimeter import __version__
from perimeter.cli.output import (
    console,
    print_catalogue,
    print_error,
    print_header,
    print_question,
    print_saved,
    print_step,
    print_worksheet_summary,
)
from perimeter.config import LoggingConfig, PerimeterSettings
from perimeter.core import (
    LEVELS,
    QuestionGenerator,
    WorksheetBuilder,
    all_definitions,
    build_diagram,
    build_layout,
)
from perimeter.domain import ShapeKind
from perimeter.exceptions import PerimeterError
from perimeter.io import PdfWriter, SvgWriter
from perimeter.utils import GenerationLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="perimeter",
    help="Generate 'find the perimeter' questions, diagrams and printable worksheets.",
    add_completion=False,
    no_args_is_help=True,
)

KIND_CHOICES = {"any": None, "polygon": ShapeKind.POLYGON, "rectilinear": ShapeKind.RECTILINEAR}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Perimeter[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate 'find the perimeter' questions, diagrams and printable worksheets."""


def _parse_kind(kind: str, allow_any: bool = True) -> ShapeKind | None:
    key = kind.lower()
    if key not in KIND_CHOICES or (key == "any" and not allow_any):
        valid = ", ".join(k for k in KIND_CHOICES if allow_any or k != "any")
        print_error(f"Invalid kind: {kind}", details=f"Valid values: {valid}")
        raise typer.Exit(code=1)
    return KIND_CHOICES[key]


def _settings(
    log_file: Path | None, log_level: str, quiet: bool
) -> tuple[PerimeterSettings, structlog.stdlib.BoundLogger]:
    settings = PerimeterSettings(
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )
    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )
    return settings, logger


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "42 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


@app.command()
def question(
    level: Annotated[
        int,
        typer.Option("--level", "-l", help="Difficulty level (1-3)", min=1, max=3),
    ] = 1,
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="Shape kind (any|polygon|rectilinear)"),
    ] = "any",
    shape: Annotated[
        str | None,
        typer.Option("--shape", "-s", help="Catalogue key (see 'perimeter catalogue')"),
    ] = None,
    hidden: Annotated[
        int | None,
        typer.Option("--hidden", help="Missing edges (0-2, axis-aligned shapes only)", min=0, max=2),
    ] = None,
    mix_units: Annotated[
        bool | None,
        typer.Option("--mix-units/--no-mix-units", help="Show some lengths in mm or m"),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for reproducible questions"),
    ] = None,
    svg: Annotated[
        Path | None,
        typer.Option("--svg", help="Write the diagram to an SVG file"),
    ] = None,
    show_answer: Annotated[
        bool,
        typer.Option("--show-answer", "-a", help="Show working and reveal missing lengths"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the question as JSON"),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write detailed logs to file"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Generate one question and optionally draw its diagram.

    Example:
        perimeter question --level 2 --kind rectilinear --seed 7 --svg q.svg
    """
    shape_kind = _parse_kind(kind)
    settings, _ = _settings(log_file, log_level, quiet)

    try:
        generator = QuestionGenerator(settings.generation, random.Random(seed))
        generated = generator.generate(
            level,
            shape_key=shape,
            kind=shape_kind,
            hidden_count=hidden,
            mix_units=mix_units,
        )

        if as_json:
            console.print_json(json.dumps(generated.to_dict()))
        elif not quiet:
            print_header(__version__)
            print_question(generated, show_answer=show_answer)

        if svg is not None:
            diagram = build_diagram(
                generated,
                settings.canvas.width,
                settings.canvas.height,
                settings.canvas.font_size,
                show_answer=show_answer,
                placement_config=settings.placement,
                style=settings.style,
            )
            SvgWriter(settings.style).save(diagram, svg)
            if not quiet and not as_json:
                print_saved(str(svg), _format_file_size(svg))

    except PerimeterError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def worksheet(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output PDF path"),
    ] = Path("perimeter-worksheet.pdf"),
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="Sheet kind (polygon|rectilinear)"),
    ] = "polygon",
    level: Annotated[
        int,
        typer.Option("--level", "-l", help="Difficulty level (1-3)", min=1, max=3),
    ] = 1,
    pages: Annotated[
        int,
        typer.Option("--pages", "-p", help="Question pages", min=1, max=20),
    ] = 1,
    differentiated: Annotated[
        bool,
        typer.Option("--differentiated", "-d", help="A third of the questions from each level"),
    ] = False,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for reproducible worksheets"),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write detailed logs to file"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Minimal console output"),
    ] = False,
) -> None:
    """Build a printable worksheet with an answer section.

    Example:
        perimeter worksheet --kind polygon --pages 2 --differentiated -o sheet.pdf
    """
    shape_kind = _parse_kind(kind, allow_any=False)
    settings, logger = _settings(log_file, log_level, quiet)

    if not quiet:
        print_header(__version__)
        mode = "differentiated" if differentiated else f"level {level}"
        print_step(f"Generating {shape_kind.value} worksheet ({mode})")

    try:
        tracker = GenerationLogger(logger)
        builder = WorksheetBuilder(
            settings.generation,
            settings.layout,
            random.Random(seed),
            generation_logger=tracker,
        )
        sheet = builder.build(shape_kind, level=level, pages=pages, differentiated=differentiated)
        layout = build_layout(sheet, settings.layout, settings.placement, settings.style)
        PdfWriter(settings.style).save(layout, output)
    except PerimeterError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if not quiet:
        print_worksheet_summary(len(layout.question_pages), len(layout.answer_pages), tracker.stats)
        print_saved(str(output), _format_file_size(output))


@app.command()
def catalogue(
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="Shape kind (any|polygon|rectilinear)"),
    ] = "any",
) -> None:
    """List the shapes questions are drawn from."""
    shape_kind = _parse_kind(kind)
    definitions = [d for d in all_definitions() if shape_kind is None or d.kind == shape_kind]
    print_catalogue(definitions)
    console.print(f"\n  Levels: {', '.join(str(level) for level in LEVELS)}")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
